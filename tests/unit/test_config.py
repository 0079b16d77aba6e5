import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))

from fontpreview_core.config import (
    DEFAULT_PREVIEW_TEXT,
    PreviewConfig,
    apply_overrides,
    config_path,
    load_config,
    validate_config,
)
from fontpreview_core.errors import InvalidConfiguration


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = load_config(Path(tmp) / "missing.json", environ={})
            self.assertEqual(cfg, PreviewConfig())
            self.assertEqual(cfg.size, "532x365")
            self.assertEqual(cfg.font_size, 38)
            self.assertEqual(cfg.preview_text, DEFAULT_PREVIEW_TEXT)
            self.assertIsNone(cfg.output)

    def test_file_then_environment_precedence(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(
                json.dumps({"bg_color": "#222222", "font_size": 20, "size": "640x480", "unknown": 1}),
                encoding="utf-8",
            )
            cfg = load_config(path, environ={"FONTPREVIEW_FONT_SIZE": "44", "FONTPREVIEW_POSITION": "-5+5"})
            self.assertEqual(cfg.bg_color, "#222222")
            self.assertEqual(cfg.size, "640x480")
            self.assertEqual(cfg.font_size, 44)
            self.assertEqual(cfg.position, "-5+5")

    def test_unreadable_file_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path, environ={}), PreviewConfig())

    def test_config_path_honours_xdg(self):
        self.assertEqual(
            config_path({"XDG_CONFIG_HOME": "/x/cfg"}),
            Path("/x/cfg") / "fontpreview" / "config.json",
        )

    def test_overrides_ignore_unset_values(self):
        cfg = apply_overrides(PreviewConfig(), bg_color=None, fg_color="#00ff00", output="~/p.png")
        self.assertEqual(cfg.bg_color, "#ffffff")
        self.assertEqual(cfg.fg_color, "#00ff00")
        self.assertEqual(cfg.output, Path("~/p.png").expanduser())

    def test_config_is_immutable(self):
        cfg = PreviewConfig()
        with self.assertRaises(Exception):
            cfg.size = "1x1"  # type: ignore[misc]

    def test_bad_background_rejected(self):
        with self.assertRaises(InvalidConfiguration) as ctx:
            validate_config(PreviewConfig(bg_color="#zzzzzz"))
        self.assertIn("#zzzzzz", ctx.exception.message)
        self.assertIn("#RRGGBB", ctx.exception.details[0])

    def test_bad_size_position_and_font_size_rejected(self):
        for cfg in (
            PreviewConfig(size="0x100"),
            PreviewConfig(size="100"),
            PreviewConfig(position="0+0"),
            PreviewConfig(position="+1+a"),
            PreviewConfig(font_size=0),
            PreviewConfig(fg_color="000000"),
        ):
            with self.subTest(cfg=cfg):
                with self.assertRaises(InvalidConfiguration):
                    validate_config(cfg)

    def test_non_numeric_font_size_rejected(self):
        with self.assertRaises(InvalidConfiguration):
            apply_overrides(PreviewConfig(), font_size="big")

    def test_valid_config_passes_and_exposes_geometry(self):
        cfg = validate_config(PreviewConfig(size="800x600", position="-20+40"))
        self.assertEqual(cfg.canvas, (800, 600))
        self.assertEqual(cfg.geometry, "800x600-20+40")


if __name__ == "__main__":
    unittest.main()
