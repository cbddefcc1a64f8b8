from bountyboard.utils.slug import (
    display_name,
    sanitize_filename,
    split_extension,
    strip_namespace,
    url_extension,
)


def test_strip_namespace():
    assert strip_namespace("File:Luffy.jpg") == "Luffy.jpg"
    assert strip_namespace("Luffy.jpg") == "Luffy.jpg"


def test_split_extension():
    assert split_extension("Monkey D Luffy.png") == ("Monkey D Luffy", ".png")
    assert split_extension("Monkey D. Luffy") == ("Monkey D. Luffy", "")
    assert split_extension(".jpg") == (".jpg", "")


def test_url_extension():
    url = "https://static.wikia.nocookie.net/onepiece/images/a/ab/Zoro.webp/revision/latest?cb=1"
    assert url_extension("https://example.org/images/Zoro.png?cb=2") == ".png"
    assert url_extension(url) == ""
    assert url_extension("https://example.org/images/noext") == ""


def test_sanitize_filename_strips_diacritics_and_illegal_chars():
    assert sanitize_filename("Portgas D. Ace") == "Portgas_D._Ace"
    assert sanitize_filename("Pokémon?  Wanted:  <Ace>") == "Pokemon_Wanted_Ace"
    assert sanitize_filename("  _Nami_  ") == "Nami"
    assert sanitize_filename("a / b | c") == "a_b_c"


def test_sanitize_filename_can_be_empty():
    assert sanitize_filename("ゾロ") == ""
    assert sanitize_filename("***") == ""


def test_display_name():
    assert display_name("Monkey_D._Luffy_Wanted.png") == "Monkey D. Luffy Wanted"
    assert display_name("  Nami   Bounty  .jpg") == "Nami Bounty"
