import subprocess
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "preview"))

from fontpreview_core.errors import CommandFailure
from fontpreview_preview.fonts import FC_LIST_FORMAT, iter_candidates, list_fonts, parse_fc_list, version_key
from fontpreview_preview.models import FontSelection


SAMPLE = "\n".join(
    [
        "Noto Sans\tRegular\t/usr/share/fonts/noto/NotoSans-Regular.ttf",
        "Font 10\tBold\t/fonts/f10.ttf",
        "Font 9\tBold\t/fonts/f9.ttf",
        "Noto Sans\tRegular\t/usr/share/fonts/noto/NotoSans-Regular.ttf",
        "broken line without tabs",
        "Symbola\t\t/fonts/Symbola.ttf",
        "",
    ]
)


class _Runner:
    def __init__(self, stdout="", returncode=0):
        self.stdout = stdout
        self.returncode = returncode
        self.calls = []

    def run(self, argv, capture=False, timeout=None):
        self.calls.append(list(argv))
        return subprocess.CompletedProcess(list(argv), self.returncode, self.stdout, "fc-list: failed")


class FontListTests(unittest.TestCase):
    def test_parse_dedupes_skips_and_sorts_version_aware(self):
        fonts = parse_fc_list(SAMPLE)
        self.assertEqual(
            [str(f) for f in fonts],
            [
                "Font 9 Bold <- /fonts/f9.ttf",
                "Font 10 Bold <- /fonts/f10.ttf",
                "Noto Sans Regular <- /usr/share/fonts/noto/NotoSans-Regular.ttf",
                "Symbola <- /fonts/Symbola.ttf",
            ],
        )

    def test_version_key_orders_numbers_numerically(self):
        names = ["Iosevka 12", "Iosevka 2", "Iosevka", "Iosevka 1a"]
        self.assertEqual(sorted(names, key=version_key), ["Iosevka", "Iosevka 1a", "Iosevka 2", "Iosevka 12"])

    def test_list_fonts_invokes_fc_list_with_format(self):
        runner = _Runner(stdout=SAMPLE)
        fonts = list_fonts(runner)
        self.assertEqual(runner.calls[0], ["fc-list", "--format", FC_LIST_FORMAT])
        self.assertEqual(len(fonts), 4)

    def test_list_fonts_failure(self):
        with self.assertRaises(CommandFailure) as ctx:
            list_fonts(_Runner(returncode=1))
        self.assertIn("fc-list: failed", ctx.exception.details)

    def test_candidates_are_lazy_lines(self):
        it = iter_candidates([FontSelection("A", "/a.ttf"), FontSelection("B")])
        self.assertEqual(next(it), "A <- /a.ttf")
        self.assertEqual(list(it), ["B"])


if __name__ == "__main__":
    unittest.main()
