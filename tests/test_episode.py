import dataclasses

import pytest

from spotterm.episode import Episode

API_EPISODE = {
    "id": "ep123",
    "uri": "spotify:episode:ep123",
    "duration_ms": 0,
    "name": "Pilot",
    "description": "The first one",
    "release_date": "2020-01-01",
    "images": [{"url": "https://img.example.com/large"}, {"url": "https://img.example.com/small"}],
}


def make_episode(**changes):
    return dataclasses.replace(Episode.from_api(API_EPISODE), **changes)


def test_from_api_copies_fields():
    episode = Episode.from_api(API_EPISODE)
    assert episode.id == API_EPISODE["id"]
    assert episode.uri == API_EPISODE["uri"]
    assert episode.duration == API_EPISODE["duration_ms"]
    assert episode.name == API_EPISODE["name"]
    assert episode.description == API_EPISODE["description"]
    assert episode.release_date == API_EPISODE["release_date"]


def test_from_api_takes_first_image():
    assert Episode.from_api(API_EPISODE).cover_url == API_EPISODE["images"][0]["url"]


def test_from_api_without_images():
    data = {**API_EPISODE, "images": []}
    assert Episode.from_api(data).cover_url is None


def test_from_api_requires_duration():
    data = {key: value for key, value in API_EPISODE.items() if key != "duration_ms"}
    with pytest.raises(KeyError):
        Episode.from_api(data)


def test_display_right_for_zero_duration():
    assert make_episode().display_right() == "00:00 [2020-01-01]"


@pytest.mark.parametrize("duration", [0, 999, 59_999, 60_000, 61_500, 3_599_999, 7_260_000])
def test_duration_str_encodes_whole_seconds(duration):
    text = make_episode(duration=duration).duration_str()
    minutes, seconds = text.split(":")
    assert len(seconds) == 2 and len(minutes) >= 2
    assert 0 <= int(seconds) < 60
    assert int(minutes) * 60 + int(seconds) == duration // 1000


def test_display_right_ends_with_release_date():
    episode = make_episode(duration=125_000, release_date="2021-06-30")
    assert episode.display_right().startswith(episode.duration_str())
    assert episode.display_right().endswith("[2021-06-30]")


def test_text_forms_use_name():
    episode = make_episode(name="Season finale")
    assert str(episode) == "Season finale"
    assert episode.display_left() == "Season finale"


def test_share_url_contains_id():
    assert make_episode(id="xyz").share_url() == "https://open.spotify.com/episode/xyz"


def test_asdict_round_trip():
    episode = make_episode(duration=42_000)
    assert Episode(**dataclasses.asdict(episode)) == episode