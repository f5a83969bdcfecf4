"""Hello World — the simplest wren dispatcher.

Demonstrates a filter chain, path variables, sync and async handlers,
HTTPError responses, and the not-found fallback.

wren is a library, not a server: feed it ``httpx.Request`` objects from
whatever accepts connections. Here we just dispatch a few by hand.

Run:
    python app.py
"""

import httpx

from wren import Dispatcher, Filter, HTTPError, filter_http

dispatcher = Dispatcher()


@dispatcher.route(lambda req: filter_http(req).filter_path("/").filter_method("GET"))
def index(chain: Filter) -> str:
    return "Hello, World!"


@dispatcher.route(lambda req: filter_http(req).filter_path("/hello/{}").filter_method("GET"))
async def hello(chain: Filter) -> httpx.Response:
    name = chain.get_path_var(1) or ""
    return httpx.Response(200, text=await hello_world_impl(name))


@dispatcher.route(
    lambda req: filter_http(req)
    .filter_path("/item/{}")
    .filter_method("POST")
    .filter_header("content-type", "text/{}")
)
def create_item(chain: Filter) -> httpx.Response:
    name = chain.get_path_var(1) or ""
    if name == "teapot":
        raise HTTPError(status=418, detail="Short and spout!")
    return httpx.Response(201, text=f"Created {name}")


async def hello_world_impl(name: str) -> str:
    return f"Hello {name}!"


if __name__ == "__main__":
    for method, url in [
        ("GET", "http://127.0.0.1:3000/"),
        ("GET", "http://127.0.0.1:3000/hello/wren"),
        ("GET", "http://127.0.0.1:3000/missing"),
    ]:
        response = dispatcher.dispatch_sync(httpx.Request(method, url))
        print(method, url, response.status_code, response.text)
