"""Build a gate evaluator from settings."""

from content_gate.fetch.config import ResolverConfig
from content_gate.fetch.resolver import RedirectResolver
from content_gate.gate.collaborators import StaticDeviceClassifier, StaticUserIdentity
from content_gate.gate.evaluator import GateEvaluator
from content_gate.gate.models import GateOptions
from content_gate.reachability.monitor import SocketConnectivityMonitor
from content_gate.reachability.probe import NetworkReachabilityProbe
from content_gate.settings.app import GateSettings
from content_gate.store.protocols import PersistentStore


def create_evaluator(settings: GateSettings, store: PersistentStore) -> GateEvaluator:
    """Create a GateEvaluator wired to real network collaborators.

    Args:
        settings: Gate settings.
        store: Durable store for decisions (must already be connected).

    Returns:
        Configured GateEvaluator.
    """

    def monitor_factory() -> SocketConnectivityMonitor:
        return SocketConnectivityMonitor(
            host=settings.reachability_host,
            port=settings.reachability_port,
            connect_timeout=settings.reachability_timeout_seconds,
        )

    resolver = RedirectResolver(
        ResolverConfig(
            user_agent=settings.user_agent,
            max_redirects=settings.max_redirects,
        )
    )
    return GateEvaluator(
        store=store,
        reachability=NetworkReachabilityProbe(monitor_factory),
        resolver=resolver,
        device_classifier=StaticDeviceClassifier(
            device_model=settings.device_model,
            excluded_models=tuple(settings.excluded_device_models),
        ),
        user_identity=StaticUserIdentity(settings.user_id),
    )


def default_options(settings: GateSettings) -> GateOptions:
    """Get evaluation options carrying the configured timeouts.

    Args:
        settings: Gate settings.

    Returns:
        GateOptions with settings-derived timeouts.
    """
    return GateOptions(
        timeout_seconds=settings.probe_timeout_seconds,
        reachability_timeout_seconds=settings.reachability_timeout_seconds,
    )
