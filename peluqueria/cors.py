# peluqueria/cors.py

import logging

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)


class PreflightCORSMiddleware(CORSMiddleware):
    """Named CORS policy that also answers every OPTIONS request itself.

    OPTIONS never reaches routing: a preflight from an allowed origin gets the
    policy headers with 204 No Content; any other OPTIONS, refused preflights
    included, gets a bare 204.
    """

    def __init__(self, app, policy_name: str = "default", **kwargs):
        super().__init__(app, **kwargs)
        self.policy_name = policy_name
        logger.info("CORS policy %s active for %s", policy_name, ", ".join(kwargs.get("allow_origins", ())))

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["method"] == "OPTIONS":
            headers = Headers(scope=scope)
            if "origin" in headers and "access-control-request-method" in headers:
                response = self.preflight_response(request_headers=headers)
            else:
                response = Response(status_code=204)
            await response(scope, receive, send)
            return

        await super().__call__(scope, receive, send)

    def preflight_response(self, request_headers):
        response = super().preflight_response(request_headers=request_headers)
        if response.status_code != 200:
            # refused: no allow headers, the browser blocks the actual request
            logger.warning("Refused preflight from %s", request_headers.get("origin"))
            return Response(status_code=204)

        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)


def add_cors_policy(app, settings):
    # Added last so it wraps everything else, routing included
    app.add_middleware(
        PreflightCORSMiddleware,
        policy_name=settings.cors_policy_name,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
