"""The ``/hello`` endpoint."""

from .http.messages import HttpRequest, HttpResponse


async def hello(_req: HttpRequest) -> HttpResponse:
    return HttpResponse.text("hello")
