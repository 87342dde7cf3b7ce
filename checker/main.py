import logging

import httpx
from fastapi import FastAPI

from checker.api.routes.calendar import router
from checker.core.observability import configure_logging
from checker.core.observability import init_sentry
from checker.core.security import MissingCredentials
from checker.core.security import validate_credentials
from checker.services.fetch_service import FetchCoordinator
from checker.services.fetch_service import PollingLoop
from checker.settings import Settings


logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> FastAPI:
    """Build the API around one fetch coordinator and its polling loop.

    Missing credentials do not abort startup; pipeline endpoints answer 503
    with the credential message instead.
    """

    if app_settings is None:
        app_settings = Settings()

    configure_logging(app_settings)
    init_sentry(app_settings)

    app = FastAPI(title="Contributes Checker")
    app.state.coordinator = None
    app.state.polling_loop = None
    app.state.startup_error = None

    credentials = validate_credentials(app_settings)
    if isinstance(credentials, MissingCredentials):
        logger.error("Contribution fetching disabled: %s", credentials.message)
        app.state.startup_error = credentials.message
    else:
        coordinator = FetchCoordinator(
            credentials=credentials,
            graphql_url=app_settings.github_graphql_url,
            user_agent=app_settings.user_agent,
            transport=transport,
        )
        app.state.coordinator = coordinator
        app.state.polling_loop = PollingLoop(coordinator)

    app.include_router(router)
    return app


app = create_app()
