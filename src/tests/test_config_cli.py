import contextlib
import io
import json
import logging
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

# Add src directory to path for imports
BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from framescan_app import config as config_module
from framescan_app.config import CONFIG_ENV_VAR, Config, ConfigError
from framescan_app.main import EXIT_NO_FRAMES, EXIT_OK, EXIT_UNREADABLE, main

FRAME = bytes([0xFF, 0xFB, 0x90, 0x00]) + bytes(413)
PADDED_FRAME = bytes([0xFF, 0xFB, 0x92, 0x00]) + bytes(414)


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def _write(self, text: str) -> str:
        path = os.path.join(self.tmpdir.name, "framescan.toml")
        Path(path).write_text(text)
        return path

    def test_defaults_when_file_missing(self):
        cfg = Config.load(os.path.join(self.tmpdir.name, "nope.toml"))
        self.assertEqual(cfg.get("service", "max_body_bytes"), 10 * 1024 * 1024)
        self.assertEqual(cfg["response"]["allow_origin"], "*")
        self.assertEqual(cfg.log_level, logging.INFO)

    def test_defaults_are_not_shared(self):
        a = Config()
        a.data["service"]["version"] = "9"
        self.assertEqual(Config().get("service", "version"), "1.0.0")

    def test_load_from_file(self):
        path = self._write('[service]\nlog_level = "debug"\nmax_body_bytes = 2048\n')
        cfg = Config.load(path)
        self.assertEqual(cfg.get("service", "max_body_bytes"), 2048)
        self.assertEqual(cfg.log_level, logging.DEBUG)
        # missing params and sections fall back to defaults
        self.assertEqual(cfg.get("service", "environment"), "development")
        self.assertEqual(cfg.get("response", "allow_origin"), "*")

    def test_env_var_path(self):
        path = self._write('[service]\nenvironment = "staging"\n')
        with mock.patch.dict(os.environ, {CONFIG_ENV_VAR: path}):
            cfg = Config.load()
        self.assertEqual(cfg.get("service", "environment"), "staging")

    def test_out_of_bounds(self):
        for value in ("0", "104857601", '"big"', "true"):
            with self.subTest(value=value):
                with self.assertRaises(ConfigError):
                    Config.load(self._write(f"[service]\nmax_body_bytes = {value}\n"))

    def test_bool_is_not_a_size(self):
        with self.assertRaises(ConfigError):
            Config({"service": {"max_body_bytes": True}, "response": {}})

    def test_section_must_be_table(self):
        with self.assertRaises(ConfigError):
            Config.load(self._write('service = "oops"\n'))

    def test_caller_dict_not_mutated(self):
        raw = {"service": {"environment": "qa"}}
        cfg = Config(raw)
        self.assertEqual(raw, {"service": {"environment": "qa"}})
        self.assertEqual(cfg.get("service", "max_body_bytes"), 10 * 1024 * 1024)

    def test_missing_default_file_logs_at_debug(self):
        missing = os.path.join(self.tmpdir.name, "nope.toml")
        with mock.patch.dict(os.environ):
            os.environ.pop(CONFIG_ENV_VAR, None)
            with mock.patch.object(config_module, "DEFAULT_CONFIG_PATH", missing):
                with self.assertLogs("framescan_app.config", level="DEBUG") as logs:
                    Config.load()
        self.assertEqual([r.levelname for r in logs.records if "not found" in r.getMessage()], ["DEBUG"])

    def test_missing_explicit_file_warns(self):
        with self.assertLogs("framescan_app.config", level="WARNING") as logs:
            Config.load(os.path.join(self.tmpdir.name, "nope.toml"))
        self.assertIn("Config file not found", logs.output[0])

    def test_unknown_log_level(self):
        with self.assertRaises(ConfigError):
            Config({"service": {"log_level": "LOUD"}, "response": {}})

    def test_unparseable_file(self):
        with self.assertRaises(ConfigError):
            Config.load(self._write("[service\nlog_level = \n"))


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.cfg = os.path.join(self.tmpdir.name, "missing.toml")

    def tearDown(self):
        self.tmpdir.cleanup()

    def _file(self, name: str, data: bytes) -> str:
        path = os.path.join(self.tmpdir.name, name)
        Path(path).write_bytes(data)
        return path

    def _run(self, *args):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(["--config", self.cfg, *args])
        return code, out.getvalue(), err.getvalue()

    def test_counts_frames(self):
        path = self._file("a.mp3", FRAME * 3)
        code, out, _ = self._run(path)
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out.strip(), f"{path}: 3 frames")

    def test_stats_output(self):
        path = self._file("b.mp3", FRAME + PADDED_FRAME + bytes([0xFF, 0xFB, 0x00, 0x00]))
        code, out, _ = self._run("--stats", path)
        self.assertEqual(code, EXIT_OK)
        self.assertIn("2 frames", out)
        self.assertIn("1 padded", out)
        self.assertIn("halted on reserved header", out)

    def test_json_output(self):
        path = self._file("c.mp3", FRAME * 2)
        code, out, _ = self._run("--json", "--stats", path)
        self.assertEqual(code, EXIT_OK)
        rec = json.loads(out)
        self.assertEqual(rec["file"], path)
        self.assertEqual(rec["frameCount"], 2)
        self.assertEqual(rec["paddedFrames"], 0)
        self.assertFalse(rec["halted"])

    def test_no_frames_exit_code(self):
        good = self._file("good.mp3", FRAME)
        bad = self._file("bad.mp3", b"not an mp3")
        code, out, _ = self._run(good, bad)
        self.assertEqual(code, EXIT_NO_FRAMES)
        self.assertIn(f"{bad}: 0 frames", out)

    def test_unreadable_file(self):
        missing = os.path.join(self.tmpdir.name, "missing.mp3")
        good = self._file("good.mp3", FRAME)
        code, out, err = self._run(missing, good)
        self.assertEqual(code, EXIT_UNREADABLE)
        self.assertIn("cannot read file", err)
        self.assertIn(f"{good}: 1 frames", out)

    def test_config_section_not_a_table(self):
        self.cfg = self._file("bad.toml", b'service = "oops"\n')
        code, _, err = self._run(self._file("a.mp3", FRAME))
        self.assertEqual(code, EXIT_UNREADABLE)
        self.assertIn("Config error", err)

    def test_bad_config(self):
        self.cfg = self._file("bad.toml", b"[service]\nmax_body_bytes = -1\n")
        code, _, err = self._run(self._file("a.mp3", FRAME))
        self.assertEqual(code, EXIT_UNREADABLE)
        self.assertIn("Config error", err)


if __name__ == "__main__":
    unittest.main()
