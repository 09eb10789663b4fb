"""One-time content-routing gate."""

from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from content_gate.fetch.constants import PATH_ID_PARAM, PUSH_ID_PARAM
from content_gate.fetch.models import ProbeErrorClass, ProbeResult
from content_gate.fetch.query import get_query_param, set_query_param
from content_gate.fetch.redact import redact_url
from content_gate.fetch.resolver import RedirectResolver
from content_gate.gate.constants import (
    COMPONENT_GATE,
    REASON_ALL_CHECKS_PASSED,
    REASON_CACHED_APP,
    REASON_DATE_NOT_REACHED,
    REASON_DEVICE_NOT_SUPPORTED,
    REASON_FAILED_NEW_URL,
    REASON_NEW_URL_WITH_PATH_ID,
    REASON_NO_INTERNET,
    REASON_SERVER_CHECK_FAILED,
    REASON_VALID_CACHED_EXTERNAL,
)
from content_gate.gate.metrics import GateMetrics
from content_gate.gate.models import GateFailure, GateOptions, GateResult
from content_gate.gate.protocols import DeviceClassifier, UserIdentity
from content_gate.gate.state_machine import GateState, GateStateMachine
from content_gate.observability.logging import (
    bind_evaluation_context,
    clear_evaluation_context,
)
from content_gate.reachability.probe import NetworkReachabilityProbe
from content_gate.store.decisions import DecisionCache
from content_gate.store.keys import DecisionKeys
from content_gate.store.models import DecisionRecord
from content_gate.store.protocols import PersistentStore


logger = structlog.get_logger()

_PROBE_FAILURES: dict[ProbeErrorClass, GateFailure] = {
    ProbeErrorClass.SERVER_REJECTED: GateFailure.SERVER_REJECTED,
    ProbeErrorClass.TIMEOUT: GateFailure.TIMEOUT,
    ProbeErrorClass.INVALID_URL: GateFailure.INVALID_URL,
    ProbeErrorClass.NETWORK_ERROR: GateFailure.NETWORK_ERROR,
    ProbeErrorClass.TOO_MANY_REDIRECTS: GateFailure.NETWORK_ERROR,
}


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _outcome_label(reason: str) -> str:
    # Drop the free-text detail after the fixed reason prefix
    return reason.partition(":")[0]


class GateEvaluator:
    """Decide once whether to route a user to external content.

    The first evaluation for a cache key runs four checks in order
    (reachability, target date, device class, server authorization)
    and persists the outcome. Later evaluations read the persisted
    decision: an app decision is returned as is, an external decision
    has its saved URL re-validated and, if needed, re-acquired using
    the last known ``pathid``.

    An instance also remembers what it returned for each cache key, so
    repeated calls within one process do no network activity at all.
    No outcome is ever raised as an exception.
    """

    def __init__(
        self,
        store: PersistentStore,
        reachability: NetworkReachabilityProbe,
        resolver: RedirectResolver,
        device_classifier: DeviceClassifier,
        user_identity: UserIdentity,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the evaluator.

        Args:
            store: Durable store for decisions and path ids.
            reachability: Bounded-wait reachability probe.
            resolver: Redirect resolver used for every server probe.
            device_classifier: Decides whether the device is excluded.
            user_identity: Supplies the ``push_id`` value.
            clock: Returns the current time (timezone-aware).
        """
        self._cache = DecisionCache(store)
        self._reachability = reachability
        self._resolver = resolver
        self._device_classifier = device_classifier
        self._user_identity = user_identity
        self._clock = clock
        self._memo: dict[str, GateResult] = {}
        self._metrics = GateMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_GATE)

    def evaluate(
        self,
        url: str,
        target_date: datetime,
        options: GateOptions | None = None,
    ) -> GateResult:
        """Evaluate the gate for a target URL.

        Args:
            url: Original target URL.
            target_date: Earliest instant external content may be shown.
                Naive datetimes are taken as UTC.
            options: Per-call options (defaults apply when omitted).

        Returns:
            GateResult with the routing decision, URL and reason.
        """
        options = options or GateOptions()
        keys = DecisionKeys.derive(url, options.cache_key)
        self._metrics.record_evaluation()

        memoized = self._memo.get(keys.cache_key)
        if memoized is not None:
            self._metrics.record_memo_hit()
            self._log.debug("gate_memo_hit", reason=memoized.reason)
            return memoized

        bind_evaluation_context(keys.cache_key)
        try:
            machine = GateStateMachine(keys.cache_key)
            result = self._run(machine, url, target_date, options, keys)
            self._log.info(
                "gate_evaluated",
                show_external=result.should_show_external_content,
                final_url=redact_url(result.final_url),
                reason=result.reason,
                path=[state.name for state in machine.history],
            )
        finally:
            clear_evaluation_context()

        self._memo[keys.cache_key] = result
        self._metrics.record_outcome(_outcome_label(result.reason))
        return result

    def _run(
        self,
        machine: GateStateMachine,
        url: str,
        target_date: datetime,
        options: GateOptions,
        keys: DecisionKeys,
    ) -> GateResult:
        machine.transition(GateState.CACHE_CHECK)
        record = self._cache.load(keys)

        if record.external_content_shown:
            machine.transition(GateState.EXTERNAL_CACHED)
            return self._evaluate_cached_external(machine, url, record, options, keys)

        if record.app_content_shown:
            machine.transition(GateState.APP_CACHED)
            return GateResult.show_app(REASON_CACHED_APP)

        machine.transition(GateState.FRESH_EVALUATION)
        return self._evaluate_fresh(machine, url, target_date, options, keys)

    # ===== Cached external decision =====

    def _evaluate_cached_external(
        self,
        machine: GateStateMachine,
        url: str,
        record: DecisionRecord,
        options: GateOptions,
        keys: DecisionKeys,
    ) -> GateResult:
        """Re-validate the saved URL, re-acquiring it when rejected.

        Args:
            machine: State machine in EXTERNAL_CACHED.
            url: Original target URL.
            record: Persisted decision.
            options: Evaluation options.
            keys: Derived record keys.

        Returns:
            An external result; the URL is empty if re-acquisition failed.
        """
        saved_url = record.resolved_url or url
        saved_path_id = get_query_param(saved_url, PATH_ID_PARAM)
        if saved_path_id is not None:
            self._cache.save_path_id(keys, saved_path_id)

        machine.transition(GateState.VALIDATE_SAVED_URL)
        probe = self._resolver.resolve(
            self._with_push_id(saved_url), options.timeout_seconds
        )
        if probe.success:
            self._refresh_path_id(keys, probe)
            machine.transition(GateState.EXTERNAL)
            return GateResult.show_external(
                probe.final_url, REASON_VALID_CACHED_EXTERNAL
            )

        self._log.info("saved_url_rejected", reason=probe.reason)
        machine.transition(GateState.REACQUIRE_URL)
        return self._reacquire(machine, url, options, keys)

    def _reacquire(
        self,
        machine: GateStateMachine,
        url: str,
        options: GateOptions,
        keys: DecisionKeys,
    ) -> GateResult:
        """Request a new URL from the original target, forwarding the path id.

        The external decision is never revoked here: a failure degrades to
        an external result with an empty URL.
        """
        request_url = url
        path_id = self._cache.load_path_id(keys, url)
        if path_id is not None:
            request_url = set_query_param(request_url, PATH_ID_PARAM, path_id.path_id)

        probe = self._resolver.resolve(
            self._with_push_id(request_url), options.timeout_seconds
        )
        machine.transition(GateState.EXTERNAL)

        if not probe.success:
            self._log.warning(
                "reacquire_failed",
                reason=probe.reason,
                had_path_id=path_id is not None,
            )
            return GateResult.show_external("", REASON_FAILED_NEW_URL)

        self._cache.replace_resolved_url(keys, probe.final_url)
        self._refresh_path_id(keys, probe)
        return GateResult.show_external(probe.final_url, REASON_NEW_URL_WITH_PATH_ID)

    # ===== Fresh evaluation =====

    def _evaluate_fresh(
        self,
        machine: GateStateMachine,
        url: str,
        target_date: datetime,
        options: GateOptions,
        keys: DecisionKeys,
    ) -> GateResult:
        """Run the four checks in order, persisting the first failure.

        Args:
            machine: State machine in FRESH_EVALUATION.
            url: Original target URL.
            target_date: Earliest instant external content may be shown.
            options: Evaluation options.
            keys: Derived record keys.

        Returns:
            GateResult for the persisted decision.
        """
        if not self._reachability.is_reachable(options.reachability_timeout_seconds):
            return self._route_to_app(
                machine, keys, GateFailure.NO_CONNECTIVITY, REASON_NO_INTERNET
            )

        if not self._target_date_reached(target_date):
            return self._route_to_app(
                machine, keys, GateFailure.DATE_NOT_REACHED, REASON_DATE_NOT_REACHED
            )

        if options.device_check and self._device_classifier.is_excluded_device_class():
            return self._route_to_app(
                machine,
                keys,
                GateFailure.UNSUPPORTED_DEVICE,
                REASON_DEVICE_NOT_SUPPORTED,
            )

        probe = self._resolver.resolve(self._with_push_id(url), options.timeout_seconds)
        if not probe.success:
            failure = (
                _PROBE_FAILURES[probe.error.error_class]
                if probe.error
                else GateFailure.NETWORK_ERROR
            )
            return self._route_to_app(
                machine,
                keys,
                failure,
                f"{REASON_SERVER_CHECK_FAILED}: {probe.reason}",
            )

        self._cache.mark_external(keys, probe.final_url)
        self._refresh_path_id(keys, probe)
        machine.transition(GateState.EXTERNAL)
        return GateResult.show_external(probe.final_url, REASON_ALL_CHECKS_PASSED)

    def _route_to_app(
        self,
        machine: GateStateMachine,
        keys: DecisionKeys,
        failure: GateFailure,
        reason: str,
    ) -> GateResult:
        self._log.info("gate_check_failed", failure=failure.value, reason=reason)
        self._metrics.record_failure(failure.value)
        self._cache.mark_app(keys)
        machine.transition(GateState.APP_CACHED)
        return GateResult.show_app(reason)

    def _target_date_reached(self, target_date: datetime) -> bool:
        if target_date.tzinfo is None:
            target_date = target_date.replace(tzinfo=UTC)
        return self._clock() >= target_date

    # ===== Helpers =====

    def _with_push_id(self, url: str) -> str:
        return set_query_param(url, PUSH_ID_PARAM, self._user_identity.get_user_id())

    def _refresh_path_id(self, keys: DecisionKeys, probe: ProbeResult) -> None:
        if probe.path_id is not None:
            self._cache.save_path_id(keys, probe.path_id)
