"""Logfire setup for the comment engine.

Services log and trace directly:

    logfire.info("Comment merged", comment_id=str(comment.id))

    with logfire.span("comment_mutation.submit", post_id=str(post_id)):
        ...
"""

import logfire

from pawtalk.config import ObservabilitySettings, Settings

SERVICE_NAME = "pawtalk-engine"
SERVICE_VERSION = "0.1.0"


def should_send(observability: ObservabilitySettings) -> bool:
    """An explicit setting wins; otherwise send only when a token is set."""
    if observability.send_to_logfire is not None:
        return observability.send_to_logfire
    return bool(observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire: console always, cloud when enabled.

    Args:
        settings: Application settings
    """
    observability = settings.observability
    send = should_send(observability)
    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire=send,
        token=observability.logfire_token,
        console=logfire.ConsoleOptions(
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )
    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send,
    )


def instrument_httpx() -> None:
    """Trace every backend request made through httpx."""
    logfire.instrument_httpx()
