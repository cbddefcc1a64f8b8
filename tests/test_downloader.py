import json

from bountyboard.posters.downloader import download_posters
from bountyboard.posters.models import PosterRecord


def _record(pid, file):
    return PosterRecord(
        id=pid,
        title=file,
        name=file.rsplit(".", 1)[0],
        file=file,
        image_url=f"https://img.example/{file}",
        width=600,
        height=900,
    )


CATALOG = [_record(1, "Luffy.jpg"), _record(2, "Nami.png"), _record(3, "Zoro.jpg")]


def _image_handler(fake_response, failing=()):
    def handler(url, params):
        name = url.rsplit("/", 1)[-1]
        if name in failing:
            return fake_response(status_code=404, reason="Not Found")
        return fake_response(content=f"bytes-of-{name}".encode())

    return handler


def test_downloads_missing_files_and_writes_manifest(tmp_path, fake_session, fake_response, no_sleep):
    posters = tmp_path / "posters"
    manifest_file = tmp_path / "data" / "posters.json"
    session = fake_session(_image_handler(fake_response))

    manifest, stats = download_posters(
        CATALOG, posters, manifest_file, session=session, delay=0.06, sleep=no_sleep
    )

    assert (stats.total, stats.downloaded, stats.skipped, stats.failed) == (3, 3, 0, 0)
    assert (posters / "Nami.png").read_bytes() == b"bytes-of-Nami.png"
    assert not list(posters.glob("*.part"))
    assert no_sleep.calls == [0.06, 0.06, 0.06]

    written = json.loads(manifest_file.read_text(encoding="utf-8"))
    assert [p["file"] for p in written] == ["Luffy.jpg", "Nami.png", "Zoro.jpg"]
    assert written[0] == {
        "id": 1,
        "title": "Luffy.jpg",
        "name": "Luffy",
        "file": "Luffy.jpg",
        "imageUrl": "https://img.example/Luffy.jpg",
        "width": 600,
        "height": 900,
    }


def test_rerun_on_populated_directory_fetches_nothing(tmp_path, fake_session, fake_response, no_sleep):
    posters = tmp_path / "posters"
    manifest_file = tmp_path / "posters.json"
    download_posters(
        CATALOG, posters, manifest_file,
        session=fake_session(_image_handler(fake_response)), sleep=no_sleep,
    )
    first = manifest_file.read_text(encoding="utf-8")

    session = fake_session(_image_handler(fake_response))
    sleeps_before = len(no_sleep.calls)
    _, stats = download_posters(CATALOG, posters, manifest_file, session=session, sleep=no_sleep)

    assert session.calls == []
    assert len(no_sleep.calls) == sleeps_before
    assert (stats.downloaded, stats.skipped, stats.failed) == (0, 3, 0)
    assert manifest_file.read_text(encoding="utf-8") == first


def test_partial_directory_only_fetches_missing(tmp_path, fake_session, fake_response, no_sleep):
    posters = tmp_path / "posters"
    posters.mkdir()
    (posters / "Luffy.jpg").write_bytes(b"already here")
    session = fake_session(_image_handler(fake_response))

    _, stats = download_posters(CATALOG, posters, tmp_path / "m.json", session=session, sleep=no_sleep)

    fetched = [url for url, _ in session.calls]
    assert fetched == ["https://img.example/Nami.png", "https://img.example/Zoro.jpg"]
    assert (posters / "Luffy.jpg").read_bytes() == b"already here"
    assert (stats.downloaded, stats.skipped) == (2, 1)


def test_failed_downloads_stay_in_manifest(tmp_path, fake_session, fake_response, no_sleep, connection_error):
    posters = tmp_path / "posters"
    manifest_file = tmp_path / "posters.json"

    def handler(url, params):
        if url.endswith("Zoro.jpg"):
            raise connection_error
        return _image_handler(fake_response, failing={"Nami.png"})(url, params)

    manifest, stats = download_posters(
        CATALOG, posters, manifest_file, session=fake_session(handler), delay=0.06, sleep=no_sleep
    )

    assert (stats.downloaded, stats.failed) == (1, 2)
    assert not (posters / "Nami.png").exists()
    assert not (posters / "Zoro.jpg").exists()
    assert len(no_sleep.calls) == 3
    written = json.loads(manifest_file.read_text(encoding="utf-8"))
    assert [p["id"] for p in written] == [1, 2, 3]
    assert [r.id for r in manifest] == [1, 2, 3]


def test_optional_dimensions_are_omitted(tmp_path, fake_session, fake_response, no_sleep):
    record = PosterRecord(id=9, title="Buggy.gif", name="Buggy", file="Buggy.gif", image_url="https://img.example/Buggy.gif")
    manifest_file = tmp_path / "posters.json"

    download_posters(
        [record], tmp_path / "posters", manifest_file,
        session=fake_session(_image_handler(fake_response)), sleep=no_sleep,
    )

    written = json.loads(manifest_file.read_text(encoding="utf-8"))
    assert "width" not in written[0]
    assert "height" not in written[0]


def test_responses_are_closed_even_on_error_status(tmp_path, fake_session, fake_response, no_sleep):
    responses = []

    def handler(url, params):
        if url.endswith("Nami.png"):
            resp = fake_response(status_code=404, reason="Not Found")
        else:
            resp = fake_response(content=b"poster")
        responses.append(resp)
        return resp

    _, stats = download_posters(
        CATALOG, tmp_path / "posters", tmp_path / "posters.json",
        session=fake_session(handler), sleep=no_sleep,
    )

    assert stats.failed == 1
    assert len(responses) == 3
    assert all(r.closed for r in responses)
