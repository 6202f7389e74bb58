"""Name candidate generation tests"""

from steamcompass.utils.name_variants import name_candidates, strip_trademarks


class TestStripTrademarks:
    """Trademark glyph removal"""

    def test_strips_glyphs(self):
        assert strip_trademarks("DOOM® Eternal™") == "DOOM Eternal"

    def test_empty(self):
        assert strip_trademarks("") == ""


class TestNameCandidates:
    """Ordered search-name variants"""

    def test_full_variant_order(self):
        candidates = name_candidates("Tom Clancy's Rainbow Six® Siege (2015): Deluxe 3")

        assert candidates == [
            "Tom Clancy's Rainbow Six Siege (2015): Deluxe 3",
            "Tom Clancy's Rainbow Six Siege (2015)",
            "Tom Clancy's Rainbow Six Siege: Deluxe 3",
            "Tom Clancy's Rainbow Six Siege (): Deluxe",
            "tomclancy'srainbowsixsiege(2015):deluxe3",
        ]

    def test_subtitle_dropped(self):
        candidates = name_candidates("The Witcher 3: Wild Hunt")

        assert candidates[0] == "The Witcher 3: Wild Hunt"
        assert candidates[1] == "The Witcher 3"

    def test_duplicates_removed(self):
        assert name_candidates("Celeste") == ["Celeste", "celeste"]

    def test_short_candidates_skipped(self):
        """'Ys' and its variants are too short to search"""
        assert name_candidates("Ys") == []

    def test_digit_only_variant_skipped(self):
        assert name_candidates("198X") == ["198X", "198x"]

    def test_portal_2(self):
        assert name_candidates("Portal 2") == ["Portal 2", "Portal", "portal2"]

    def test_deterministic(self):
        assert name_candidates("Hades II: Early Access") == name_candidates("Hades II: Early Access")
