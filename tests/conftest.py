"""Shared fixtures: canned UrFU payloads and a ScheduleService wired to httpx.MockTransport."""

import logging

import httpx
import pytest

from urfu_schedule.urfu.service import ScheduleService

logging.getLogger("httpx").setLevel(logging.WARNING)

BASE_URL = "https://urfu.ru/api/v2"


def _event(**overrides):
    event = {
        "title": "Мат. анализ",
        "date": "2025-03-18",
        "timeBegin": "09:00",
        "timeEnd": "10:30",
        "teacherName": "Иванов И.И.",
    }
    event.update(overrides)
    return event


@pytest.fixture
def make_event():
    return _event


@pytest.fixture
def sample_events():
    return [
        _event(),
        _event(title="Физика", timeBegin="10:40", timeEnd="12:10", teacherName="Петров П.П."),
        _event(title="История", date="2025-03-19", teacherName="Сидорова А.А."),
    ]


@pytest.fixture
def requests_log():
    return []


@pytest.fixture
def make_service(requests_log):
    """Build a ScheduleService whose every request is answered by ``handler``."""

    def factory(handler):
        def recording_handler(request: httpx.Request):
            requests_log.append(request)
            return handler(request)

        return ScheduleService(
            base_url=BASE_URL, transport=httpx.MockTransport(recording_handler)
        )

    return factory
