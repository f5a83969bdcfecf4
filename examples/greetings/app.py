"""Greetings — a service object whose methods are the handlers.

Demonstrates sharing state between handlers through a service instance,
query and header filters, a custom predicate over request extensions,
and the 404/405/400 fallback policy.

Run:
    python app.py
"""

import anyio
import httpx

from wren import BadRequest, DispatchConfig, Dispatcher, Filter, NotFound, filter_http


class GreetingService:
    """Stores a greeting per user. Handlers are bound methods."""

    def __init__(self) -> None:
        self._greetings: dict[str, str] = {}
        self._lock = anyio.Lock()

    async def greet(self, chain: Filter) -> httpx.Response:
        name = chain.get_path_var(1) or ""
        async with self._lock:
            greeting = self._greetings.get(name.upper(), "Hello")
        return httpx.Response(200, text=f"{greeting} {name}!")

    async def set_greeting(self, chain: Filter) -> httpx.Response:
        name = chain.get_path_var(1) or ""
        greeting = chain.and_then(lambda req: req.content.decode("utf-8").strip())
        if not greeting:
            raise BadRequest("Greeting must not be empty")
        async with self._lock:
            self._greetings[name.upper()] = greeting
        return httpx.Response(204)

    async def forget(self, chain: Filter) -> httpx.Response:
        name = chain.get_path_var(1) or ""
        async with self._lock:
            if self._greetings.pop(name.upper(), None) is None:
                raise NotFound(f"No greeting for {name}")
        return httpx.Response(204)


def is_admin(request: httpx.Request) -> bool:
    return request.extensions.get("role") == "admin"


service = GreetingService()

dispatcher = (
    Dispatcher(DispatchConfig(distinguish_failures=True))
    .route(
        lambda req: filter_http(req).filter_path("/hello/{}").filter_method({"GET", "HEAD"}),
        service.greet,
    )
    .route(
        lambda req: filter_http(req)
        .filter_path("/hello/{}")
        .filter_method("PUT")
        .filter_header("content-type", "text/plain{}"),
        service.set_greeting,
    )
    .route(
        lambda req: filter_http(req)
        .filter_path("/hello/{}")
        .filter_method("DELETE")
        .filter_query("confirm", "yes")
        .filter_custom(is_admin),
        service.forget,
    )
)


if __name__ == "__main__":
    base = "http://127.0.0.1:3000"
    requests = [
        httpx.Request("GET", f"{base}/hello/ada"),
        httpx.Request("PUT", f"{base}/hello/ada", headers={"content-type": "text/plain"}, content=b"Howdy"),
        httpx.Request("GET", f"{base}/hello/ada"),
        httpx.Request("PATCH", f"{base}/hello/ada"),
    ]
    for request in requests:
        response = dispatcher.dispatch_sync(request)
        print(request.method, request.url, response.status_code, response.text)
