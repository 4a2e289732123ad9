import pytest

from kol_tracker.config import IMPORT_SETTINGS
from kol_tracker.models.db.enums import SocialPlatform
from kol_tracker.models.schemas.imports import ColumnMapping
from kol_tracker.services.roster_import import check_row_limit, parse_csv, parse_follower_count, validate_row


@pytest.mark.parametrize("raw,expected", [
    ("1.2M", 1_200_000),
    ("520K", 520_000),
    ("2.5k", 2_500),
    ("12,500", 12_500),
    (" 3 b ", 3_000_000_000),
    (1234.5, 1235),
    (77, 77),
    ("", 0),
    ("n/a", 0),
    (None, 0),
    (True, 0),
    (-40, 0),
])
def test_parse_follower_count(raw, expected):
    assert parse_follower_count(raw) == expected


def test_valid_row_with_profile_link():
    row = {
        "Name": "Bodoggos",
        "Platform": "TikTok",
        "Profile Link": "https://tiktok.com/@bodoggos",
        "TikTok Followers": "520K",
        "Email/Contact": "bodoggos@example.com",
    }
    result = validate_row(row, row_number=5)
    assert result.valid
    assert result.row_number == 5
    assert result.warnings == []
    links = result.data.platforms
    assert len(links) == 1
    assert links[0].platform == SocialPlatform.TIKTOK
    assert links[0].profile_url == "https://tiktok.com/@bodoggos"
    assert links[0].follower_count == 520_000


def test_multiple_links_and_platform_column_fallback():
    row = {
        "Name": "Crypto Wendy",
        "Platform": "YouTube / TikTok / Twitter",
        "Profile Link": "https://youtube.com/@wendy,\nhttps://x.com/wendy",
        "Youtube subscribers": "258K",
        "TikTok Followers": "299,000",
        "Twitter Followers": "1.1M",
    }
    result = validate_row(row)
    assert result.valid
    by_platform = {link.platform: link for link in result.data.platforms}
    assert set(by_platform) == {SocialPlatform.YOUTUBE, SocialPlatform.TWITTER, SocialPlatform.TIKTOK}
    assert by_platform[SocialPlatform.YOUTUBE].follower_count == 258_000
    assert by_platform[SocialPlatform.TWITTER].profile_url == "https://x.com/wendy"
    assert by_platform[SocialPlatform.TWITTER].follower_count == 1_100_000
    # TikTok only named in the platform column
    assert by_platform[SocialPlatform.TIKTOK].profile_url == ""
    assert by_platform[SocialPlatform.TIKTOK].follower_count == 299_000
    assert "No email provided" in result.warnings


def test_missing_name_is_an_error():
    result = validate_row({"Name": "   ", "Platform": "YouTube"}, row_number=3)
    assert not result.valid
    assert result.data is None
    assert result.errors == ["Name is required"]


def test_no_platforms_is_only_a_warning():
    result = validate_row({"Name": "Pix", "Email/Contact": "pix@example.com"})
    assert result.valid
    assert result.data.platforms == []
    assert result.warnings == ["No platforms detected"]


def test_invalid_email_reported_as_row_error():
    result = validate_row({"Name": "Pix", "Email/Contact": "not-an-email"})
    assert not result.valid
    assert any(e.startswith("email") for e in result.errors)


def test_custom_mapping():
    mapping = ColumnMapping(
        name="KOL",
        platform=None,
        profile_link="Links",
        youtube_followers="YT",
        email=None,
        telegram_handle="TG",
    )
    row = {"KOL": "Andrew Asks", "Links": "https://youtu.be/abc", "YT": "10.5k", "TG": "@andrew"}
    result = validate_row(row, mapping)
    assert result.valid
    assert result.data.name == "Andrew Asks"
    assert result.data.telegram_handle == "@andrew"
    assert result.data.platforms[0].platform == SocialPlatform.YOUTUBE
    assert result.data.platforms[0].follower_count == 10_500


def test_unknown_hosts_are_ignored():
    row = {"Name": "Star Platinum", "Profile Link": "https://example.com/star, not a url"}
    result = validate_row(row)
    assert result.valid
    assert result.data.platforms == []


def test_row_limit(monkeypatch):
    monkeypatch.setitem(IMPORT_SETTINGS, "max_rows", 2)
    check_row_limit([{}, {}])
    with pytest.raises(ValueError):
        check_row_limit([{}, {}, {}])


def test_parse_csv_strips_bom_and_blank_rows():
    text = "\ufeffName,Platform,Email/Contact\nWendy,YouTube,wendy@example.com\n,,\nLeo,TikTok,\n"
    rows = parse_csv(text)
    assert [r["Name"] for r in rows] == ["Wendy", "Leo"]
    assert rows[0]["Platform"] == "YouTube"


def test_parse_csv_header_only():
    assert parse_csv("Name,Platform\n") == []


def test_profile_links_are_cleaned():
    row = {"Name": "Wale.Moca", "Profile Link": "https://twitter.com/walemoca/?ref=sheet"}
    result = validate_row(row)
    assert result.data.platforms[0].profile_url == "https://twitter.com/walemoca"
