import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "preview"))

from fontpreview_core.config import PreviewConfig
from fontpreview_core.errors import RasterizationFailure
from fontpreview_preview.render import BACKEND_HINT, RenderInvoker, build_render_command


class _Runner:
    def __init__(self, returncode=0, stderr=""):
        self.returncode = returncode
        self.stderr = stderr
        self.calls = []

    def run(self, argv, capture=False, timeout=None):
        self.calls.append((list(argv), capture))
        return subprocess.CompletedProcess(list(argv), self.returncode, "", self.stderr)


class RenderTests(unittest.TestCase):
    def test_command_shape(self):
        cfg = PreviewConfig(bg_color="#101010", fg_color="#fafafa", size="400x200", font_size=24, preview_text="Hello")
        argv = build_render_command("DejaVu-Sans", cfg, Path("/tmp/out.png"))
        self.assertEqual(
            argv,
            [
                "convert",
                "-size",
                "400x200",
                "xc:#101010",
                "-gravity",
                "center",
                "-pointsize",
                "24",
                "-font",
                "DejaVu-Sans",
                "-fill",
                "#fafafa",
                "-annotate",
                "+0+0",
                "Hello",
                "-flatten",
                "/tmp/out.png",
            ],
        )

    def test_render_creates_parent_and_returns_output(self):
        runner = _Runner()
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "nested" / "preview.png"
            result = RenderInvoker(runner, PreviewConfig()).render("/fonts/a.ttf", out)
            self.assertEqual(result, out)
            self.assertTrue(out.parent.is_dir())
        argv, capture = runner.calls[0]
        self.assertTrue(capture)
        self.assertEqual(argv[-1], str(out))

    def test_failure_is_fatal_with_hint(self):
        runner = _Runner(returncode=1, stderr="convert: delegate library support not built-in\n")
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(RasterizationFailure) as ctx:
                RenderInvoker(runner, PreviewConfig()).render("Missing-Font", Path(tmp) / "p.png")
        err = ctx.exception
        self.assertIn("Missing-Font", err.message)
        self.assertEqual(err.details[0], "convert: delegate library support not built-in")
        self.assertEqual(err.details[-1], BACKEND_HINT)
        self.assertEqual(len(runner.calls), 1)


if __name__ == "__main__":
    unittest.main()
