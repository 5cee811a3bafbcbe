import json
import tempfile
import unittest
from pathlib import Path

from guitar_tuner.core.config import ConfigManager, TunerConfig
from guitar_tuner.core.errors import ConfigError
from guitar_tuner.note_types import STANDARD_TUNING


class TestTunerConfig(unittest.TestCase):
    def test_defaults(self):
        config = TunerConfig()
        self.assertEqual(config.tolerance_cents, 8.0)
        self.assertEqual(config.confirmation_delay, 0.8)
        self.assertEqual(config.smoothing_factor, 0.3)
        self.assertEqual((config.min_frequency, config.max_frequency), (50.0, 400.0))
        self.assertEqual(config.targets, STANDARD_TUNING)

    def test_standard_tuning_order(self):
        self.assertEqual([t.note for t in STANDARD_TUNING], ["E", "A", "D", "G", "B", "E"])
        self.assertEqual([t.ordinal for t in STANDARD_TUNING], [1, 2, 3, 4, 5, 6])
        self.assertEqual([t.string_number for t in STANDARD_TUNING], [6, 5, 4, 3, 2, 1])

    def test_round_trip_through_dict(self):
        config = TunerConfig(tolerance_cents=12.0, require_note_match=False)
        data = config.to_dict()
        self.assertNotIn("targets", data)
        self.assertEqual(TunerConfig.from_dict(data), config)

    def test_unknown_keys_are_ignored(self):
        config = TunerConfig.from_dict({"tolerance_cents": 10.0, "colour": "orange"})
        self.assertEqual(config.tolerance_cents, 10.0)

    def test_invalid_values(self):
        invalid = [
            {"tolerance_cents": 0},
            {"confirmation_delay": -1},
            {"smoothing_factor": 0},
            {"jump_smoothing_factor": 1.5},
            {"min_frequency": 400.0, "max_frequency": 50.0},
            {"min_confidence": 0.1, "fft_min_confidence": 0.2},
            {"min_lag": 0},
            {"octave_tolerance": 0},
            {"targets": ()},
        ]
        for values in invalid:
            with self.subTest(values=values):
                with self.assertRaises(ConfigError):
                    TunerConfig(**values)


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_dir = Path(self._tmp.name) / "guitar_tuner"

    def tearDown(self):
        self._tmp.cleanup()

    def test_creates_default_files(self):
        manager = ConfigManager(str(self.config_dir))
        self.assertTrue((self.config_dir / "tuner.json").exists())
        self.assertEqual(manager.tuner_config(), TunerConfig())

    def test_update_persists(self):
        manager = ConfigManager(str(self.config_dir))
        self.assertTrue(manager.update_config("tuner", {"tolerance_cents": 12.0}))

        reloaded = ConfigManager(str(self.config_dir))
        self.assertEqual(reloaded.tuner_config().tolerance_cents, 12.0)

    def test_invalid_update_is_rejected_and_not_saved(self):
        manager = ConfigManager(str(self.config_dir))
        with self.assertRaises(ConfigError):
            manager.update_config("tuner", {"tolerance_cents": -3})
        saved = json.loads((self.config_dir / "tuner.json").read_text())
        self.assertEqual(saved["tolerance_cents"], 8.0)

    def test_unknown_config_name(self):
        manager = ConfigManager(str(self.config_dir))
        self.assertFalse(manager.update_config("nope", {}))
        self.assertFalse(manager.reset_config("nope"))

    def test_reset(self):
        manager = ConfigManager(str(self.config_dir))
        manager.update_config("tuner", {"confirmation_delay": 1.5})
        manager.reset_config("tuner")
        self.assertEqual(manager.tuner_config().confirmation_delay, 0.8)

    def test_corrupt_file_falls_back_to_defaults(self):
        self.config_dir.mkdir(parents=True)
        (self.config_dir / "tuner.json").write_text("{not json")
        manager = ConfigManager(str(self.config_dir))
        self.assertEqual(manager.tuner_config(), TunerConfig())

    def test_missing_keys_are_filled_in(self):
        self.config_dir.mkdir(parents=True)
        (self.config_dir / "tuner.json").write_text(json.dumps({"tolerance_cents": 10.0}))
        manager = ConfigManager(str(self.config_dir))
        config = manager.tuner_config()
        self.assertEqual(config.tolerance_cents, 10.0)
        self.assertEqual(config.confirmation_delay, 0.8)


if __name__ == "__main__":
    unittest.main()
