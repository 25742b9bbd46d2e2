from app.utils.player_names import name_keys, normalize_player_name


def test_normalize_collapses_whitespace_and_nbsp():
    assert normalize_player_name("  Stan    Wawrinka ") == "Stan Wawrinka"


def test_normalize_strips_diacritics_and_keeps_case():
    assert normalize_player_name("Gaël Monfils") == "Gael Monfils"
    assert normalize_player_name("Holger Rune") == "Holger Rune"


def test_normalize_transliterates_letters_without_combining_marks():
    assert normalize_player_name("Hubert Hurkacz Łódź") == "Hubert Hurkacz Lodz"
    assert normalize_player_name("Casper Ruud Ø") == "Casper Ruud O"


def test_normalize_empty_values():
    assert normalize_player_name(None) == ""
    assert normalize_player_name("   ") == ""


def test_name_keys_include_surname():
    assert name_keys("Carlos Alcaraz") == {"carlos alcaraz", "alcaraz"}
    assert name_keys("Sinner") == {"sinner"}
    assert name_keys("") == set()
