"""
Tests for the form state store and wizard transitions.
"""

import asyncio

import httpx
import pytest

from conftest import COLLECTOR_URL, fill_to_review
from watersurvey.collector.http import HttpCollector
from watersurvey.collector.interface import (
    GENERIC_SAVE_ERROR,
    MISSING_COLLECTOR_ERROR,
    ApplicationError,
    ConfigurationError,
    NetworkError,
)
from watersurvey.collector.mock import InMemoryCollector
from watersurvey.config import Settings
from watersurvey.shared.exceptions import InvalidFieldError
from watersurvey.survey.models import (
    ContactPurpose,
    Experience,
    ServiceZone,
    SurveyResponse,
    Topic,
    WizardPhase,
)
from watersurvey.survey.store import FormStateStore


class TestFieldUpdates:
    def test_update_field_replaces_response(self, store: FormStateStore) -> None:
        before = store.response
        view = store.update_field("name", "Avery")

        assert store.response.name == "Avery"
        assert before.name == ""
        assert store.response is not before
        assert view.response.name == "Avery"

    def test_update_field_accepts_camel_case_name(self, store: FormStateStore) -> None:
        store.update_field("accountNumber", "ACC-00012345")
        store.update_field("followUp", False)

        assert store.response.account_number == "ACC-00012345"
        assert store.response.follow_up is False

    def test_update_field_coerces_enum_values(self, store: FormStateStore) -> None:
        store.update_field("zone", "North Zone")
        store.update_field("purpose", "Reporting an issue")
        store.update_field("experience", "poor")

        assert store.response.zone is ServiceZone.NORTH
        assert store.response.purpose is ContactPurpose.REPORT_ISSUE
        assert store.response.experience is Experience.POOR

    def test_unknown_field_rejected(self, store: FormStateStore) -> None:
        before = store.response
        with pytest.raises(InvalidFieldError) as exc_info:
            store.update_field("favouriteColour", "blue")

        assert exc_info.value.details == {"field": "favouriteColour"}
        assert store.response is before

    @pytest.mark.parametrize("value", [0, 11, "8", 7.5])
    def test_nps_out_of_range_rejected(self, store: FormStateStore, value) -> None:
        with pytest.raises(InvalidFieldError):
            store.update_field("nps", value)

        assert store.response.nps == 8

    def test_unknown_zone_rejected(self, store: FormStateStore) -> None:
        with pytest.raises(InvalidFieldError):
            store.update_field("zone", "Mars Zone")

        assert store.response.zone is ServiceZone.CENTRAL

    def test_topics_replacement_must_keep_all_keys(self, store: FormStateStore) -> None:
        with pytest.raises(InvalidFieldError):
            store.update_field("topics", {"pressure": 5})

        assert set(store.response.topics) == set(Topic)

    def test_update_topic(self, store: FormStateStore) -> None:
        view = store.update_topic("pressure", 5)

        assert store.response.topics[Topic.PRESSURE] == 5
        assert store.response.topics[Topic.QUALITY] == 4
        assert view.overall_score == "4.3"

    @pytest.mark.parametrize("value", [0, 6, "5"])
    def test_update_topic_out_of_range_rejected(self, store: FormStateStore, value) -> None:
        with pytest.raises(InvalidFieldError):
            store.update_topic(Topic.BILLING, value)

        assert store.response.topics[Topic.BILLING] == 4

    def test_update_unknown_topic_rejected(self, store: FormStateStore) -> None:
        with pytest.raises(InvalidFieldError):
            store.update_topic("taste", 3)

    def test_subscribers_receive_new_view(self, store: FormStateStore) -> None:
        seen = []
        unsubscribe = store.subscribe(seen.append)

        store.update_field("name", "Avery")
        store.update_topic("support", 1)
        unsubscribe()
        store.update_field("name", "Blake")

        assert [v.response.name for v in seen] == ["Avery", "Avery"]
        assert seen[-1].overall_score == "3.3"

    def test_rejected_update_does_not_notify(self, store: FormStateStore) -> None:
        seen = []
        store.subscribe(seen.append)

        with pytest.raises(InvalidFieldError):
            store.update_field("nps", 42)

        assert seen == []


class TestNavigation:
    @pytest.mark.asyncio
    async def test_scenario_a_valid_account_step_advances(self, store: FormStateStore) -> None:
        store.update_field("name", "Avery Johnson")
        store.update_field("email", "avery@email.com")

        assert await store.advance() is True
        assert store.wizard.step == 1

    @pytest.mark.asyncio
    async def test_blank_name_blocks_advance(self, store: FormStateStore) -> None:
        store.update_field("name", "   ")
        store.update_field("email", "avery@email.com")

        assert await store.advance() is False
        assert store.wizard.step == 0

    @pytest.mark.asyncio
    async def test_invalid_phone_blocks_advance(self, store: FormStateStore) -> None:
        store.update_field("name", "Avery")
        store.update_field("email", "avery@email.com")
        store.update_field("phone", "123")

        assert await store.advance() is False
        assert store.view().field_hints == {"phone": "Enter at least 7 digits."}

    @pytest.mark.asyncio
    async def test_scenario_b_feedback_gate(self, store: FormStateStore) -> None:
        store.update_field("name", "Avery")
        store.update_field("email", "avery@email.com")
        for _ in range(3):
            await store.advance()
        assert store.wizard.step == 3

        store.update_field("feedback", "No")
        assert await store.advance() is False
        assert store.wizard.step == 3

        store.update_field("feedback", "Please fix water pressure")
        assert await store.advance() is True
        assert store.wizard.step == 4

    def test_back_at_first_step_is_noop(self, store: FormStateStore) -> None:
        assert store.back() is False
        assert store.wizard.step == 0

    @pytest.mark.asyncio
    async def test_back_moves_one_step(self, store: FormStateStore) -> None:
        await fill_to_review(store)

        assert store.back() is True
        assert store.wizard.step == 3
        assert store.back() is True
        assert store.wizard.step == 2

    @pytest.mark.asyncio
    async def test_step_stays_in_range(self, store: FormStateStore, collector: InMemoryCollector) -> None:
        collector.configure_failure(NetworkError("down"))
        await fill_to_review(store)

        for _ in range(3):
            await store.advance()
            assert 0 <= store.wizard.step <= 4
        for _ in range(7):
            store.back()
            assert 0 <= store.wizard.step <= 4
        assert store.wizard.step == 0

    @pytest.mark.asyncio
    async def test_progress_follows_step(self, store: FormStateStore) -> None:
        assert store.view().progress_percent == pytest.approx(20.0)
        await fill_to_review(store)
        assert store.view().progress_percent == pytest.approx(100.0)
        assert store.view().step_label == "Review"


class TestSubmission:
    @pytest.mark.asyncio
    async def test_successful_submission_is_terminal(
        self, store: FormStateStore, collector: InMemoryCollector
    ) -> None:
        await fill_to_review(store)

        assert await store.advance() is True

        assert store.wizard.submitted is True
        assert store.wizard.is_saving is False
        assert store.wizard.save_error == ""
        assert store.wizard.phase is WizardPhase.SUBMITTED
        assert collector.call_count == 1

        payload = collector.payloads[0]
        assert payload["name"] == "Avery Johnson"
        assert payload["feedback"] == "Please fix water pressure"
        assert payload["overallScore"] == "4.0"

    @pytest.mark.asyncio
    async def test_submitted_state_ignores_navigation(
        self, store: FormStateStore, collector: InMemoryCollector
    ) -> None:
        await fill_to_review(store)
        await store.advance()

        assert await store.advance() is False
        assert store.back() is False
        assert store.wizard.step == 4
        assert collector.call_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            NetworkError("Collector returned HTTP 500", status_code=500),
            ApplicationError("Sheet is locked"),
        ],
    )
    async def test_failed_submission_shows_generic_message(
        self, store: FormStateStore, collector: InMemoryCollector, error
    ) -> None:
        collector.configure_failure(error)
        await fill_to_review(store)

        assert await store.advance() is False

        assert store.wizard.submitted is False
        assert store.wizard.is_saving is False
        assert store.wizard.step == 4
        assert store.wizard.save_error == GENERIC_SAVE_ERROR
        assert store.last_submission_error is error

    @pytest.mark.asyncio
    async def test_configuration_error_message(
        self, store: FormStateStore, collector: InMemoryCollector
    ) -> None:
        collector.configure_failure(ConfigurationError("no url"))
        await fill_to_review(store)

        await store.advance()

        assert store.wizard.save_error == MISSING_COLLECTOR_ERROR
        assert isinstance(store.last_submission_error, ConfigurationError)

    @pytest.mark.asyncio
    async def test_retry_after_failure_clears_error(
        self, store: FormStateStore, collector: InMemoryCollector
    ) -> None:
        collector.configure_failure(NetworkError("down"))
        await fill_to_review(store)
        await store.advance()
        assert store.wizard.save_error == GENERIC_SAVE_ERROR

        collector.configure_failure(None)
        assert await store.advance() is True

        assert store.wizard.submitted is True
        assert store.wizard.save_error == ""
        assert store.last_submission_error is None
        assert collector.call_count == 2

    @pytest.mark.asyncio
    async def test_saving_flag_set_while_in_flight(
        self, store: FormStateStore, collector: InMemoryCollector
    ) -> None:
        phases = []
        store.subscribe(lambda view: phases.append((view.wizard.is_saving, view.wizard.save_error)))
        collector.configure_failure(NetworkError("down"))
        await fill_to_review(store)
        await store.advance()
        phases.clear()

        collector.configure_failure(None)
        await store.advance()

        assert phases == [(True, ""), (False, "")]

    @pytest.mark.asyncio
    async def test_second_advance_while_saving_is_ignored(
        self, store: FormStateStore, collector: InMemoryCollector
    ) -> None:
        await fill_to_review(store)
        collector.hold()

        first = asyncio.create_task(store.advance())
        while not store.wizard.is_saving:
            await asyncio.sleep(0)

        assert await store.advance() is False
        assert store.back() is False

        collector.release()
        assert await first is True
        assert collector.call_count == 1
        assert store.wizard.submitted is True


class TestReset:
    @pytest.mark.asyncio
    async def test_reset_restores_defaults(self, store: FormStateStore) -> None:
        store.update_field("zone", "West Zone")
        store.update_field("nps", 3)
        store.update_topic("quality", 1)
        await fill_to_review(store)
        await store.advance()
        assert store.wizard.submitted is True

        assert store.reset() is True

        assert store.response == SurveyResponse()
        assert store.response.zone is ServiceZone.CENTRAL
        assert store.response.nps == 8
        assert all(v == 4 for v in store.response.topics.values())
        assert store.wizard.step == 0
        assert store.wizard.submitted is False

    def test_reset_before_submission_is_noop(self, store: FormStateStore) -> None:
        store.update_field("name", "Avery")

        assert store.reset() is False
        assert store.response.name == "Avery"


def _http_store(settings: Settings, handler) -> FormStateStore:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return FormStateStore(HttpCollector(settings=settings, http_client=client), session_id="session-http")


class TestSubmissionOverHttp:
    @pytest.mark.asyncio
    async def test_server_error_keeps_review_open(self, settings: Settings) -> None:
        store = _http_store(settings, lambda request: httpx.Response(500))
        await fill_to_review(store)

        assert await store.advance() is False

        assert store.wizard.submitted is False
        assert store.wizard.is_saving is False
        assert store.wizard.save_error == GENERIC_SAVE_ERROR
        assert isinstance(store.last_submission_error, NetworkError)
        assert store.last_submission_error.status_code == 500

    @pytest.mark.asyncio
    async def test_empty_success_body_submits(self, settings: Settings) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200)

        store = _http_store(settings, handler)
        await fill_to_review(store)

        assert await store.advance() is True

        assert store.wizard.submitted is True
        assert store.wizard.save_error == ""
        assert len(requests) == 1
        assert str(requests[0].url) == COLLECTOR_URL

    @pytest.mark.asyncio
    async def test_unparseable_url_becomes_save_error(self) -> None:
        requests: list[httpx.Request] = []
        settings = Settings(collector_url="https://script.example.com/exec\x00bad")
        store = _http_store(settings, lambda request: requests.append(request) or httpx.Response(200))
        await fill_to_review(store)

        assert await store.advance() is False

        assert store.wizard.submitted is False
        assert store.wizard.is_saving is False
        assert store.wizard.save_error == MISSING_COLLECTOR_ERROR
        assert isinstance(store.last_submission_error, ConfigurationError)
        assert requests == []
