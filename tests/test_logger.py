import json
import logging

import pytest

from app.utils.logger import bind_upload_context, get_logger, setup_logging


@pytest.fixture
def log_file(tmp_path):
    """Route logging to a JSON file for the duration of a test"""
    path = tmp_path / "fleet.log"
    setup_logging(log_level="INFO", use_json=True, log_file=str(path), app_name="Fleet Test", environment="test")
    yield path
    for handler in logging.root.handlers:
        handler.close()
    setup_logging(log_level="INFO", use_json=False, environment="test")


def read_events(path):
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


def test_upload_context_is_attached_to_log_lines(log_file):
    logger = get_logger("tests.logger")

    with bind_upload_context(file_name="march.csv", imported_by="admin@example.com"):
        logger.info("Parsed trips CSV", rows=3)
    logger.info("Outside upload")

    inside, outside = read_events(log_file)

    assert inside["event"] == "Parsed trips CSV"
    assert inside["rows"] == 3
    assert inside["file_name"] == "march.csv"
    assert inside["imported_by"] == "admin@example.com"
    assert inside["app"] == "Fleet Test"
    assert inside["environment"] == "test"
    assert inside["level"] == "info"
    assert "file_name" not in outside


def test_rendered_lines_carry_no_formatter_internals(log_file):
    get_logger("tests.logger").info("structlog event")
    logging.getLogger("tests.stdlib").warning("plain record")

    events = read_events(log_file)

    assert [event["event"] for event in events] == ["structlog event", "plain record"]
    assert events[1]["app"] == "Fleet Test"
    for event in events:
        assert "_record" not in event
        assert "_from_structlog" not in event


def test_upload_logs_name_the_file(log_file, session_scope, build_service, run, trip_row, make_csv):
    async def scenario():
        async with session_scope() as session:
            await build_service(session).upload_trips(make_csv([trip_row()]), "march.csv", imported_by="ops")

    run(scenario())

    selected = [event for event in read_events(log_file) if event["event"] == "Selected new trips"]
    assert selected[0]["file_name"] == "march.csv"
    assert selected[0]["imported_by"] == "ops"


def test_request_id_is_echoed(client):
    response = client.get("/", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


def test_request_id_is_generated(client):
    response = client.get("/")

    assert response.headers["X-Request-ID"]
