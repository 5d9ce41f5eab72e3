"""Sign-in and chat pages."""

from __future__ import annotations

import html

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

from chatrelay.api.auth import get_user, set_user

router = APIRouter(tags=["pages"])

_SIGNIN_HTML = """<!DOCTYPE html>
<html>
  <head><title>Chat Relay</title></head>
  <body>
    <header>
      <h3>Chat Relay</h3>
      <p>Not yet signed in. Please enter your name below and submit.</p>
    </header>
    <form action="/signin" method="POST">
      <input type="text" id="name" name="name" />
      <button type="submit">Join</button>
    </form>
  </body>
</html>
"""

_CHAT_HTML = """<!DOCTYPE html>
<html>
  <head><title>Chat Relay</title></head>
  <body>
    <header>
      <h3>Chat Relay</h3>
      <p>Signed in as {user}</p>
      <p>Status: <span id="status">Disconnected</span></p>
    </header>
    <form id="form">
      <input type="text" id="message" />
      <button type="submit">Send</button>
    </form>
    <ul id="messages"></ul>
    <script type="module">
      const status = document.getElementById("status");
      const list = document.getElementById("messages");
      const input = document.getElementById("message");

      document.getElementById("form").addEventListener("submit", async (e) => {{
        e.preventDefault();
        const resp = await fetch("/send", {{
          method: "POST",
          headers: {{"content-type": "application/json"}},
          body: JSON.stringify({{body: input.value}}),
        }});
        if (resp.ok) input.value = "";
        else alert(await resp.text());
      }});

      async function listen() {{
        const resp = await fetch("/listen");
        status.textContent = "Connected";
        const reader = resp.body.pipeThrough(new TextDecoderStream()).getReader();
        let buf = "";
        while (true) {{
          const {{value, done}} = await reader.read();
          if (done) break;
          buf += value;
          const lines = buf.split("\\n");
          buf = lines.pop();
          for (const line of lines) {{
            const frame = JSON.parse(line);
            if (frame.kind !== "msg") continue;
            const li = document.createElement("li");
            li.textContent = `${{frame.data.user}}: ${{frame.data.body}}`;
            list.appendChild(li);
          }}
        }}
        status.textContent = "Disconnected";
      }}
      listen();
    </script>
  </body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> str:
    """Chat page when signed in, sign-in form otherwise."""
    user = get_user(request)
    if user is None:
        return _SIGNIN_HTML
    return _CHAT_HTML.format(user=html.escape(user))


@router.post("/signin")
async def signin(request: Request) -> Response:
    """Store the submitted display name in the identity cookie."""
    form = await request.form()
    name = form.get("name")
    if not isinstance(name, str):
        return PlainTextResponse("name is not valid")
    response = RedirectResponse("/", status_code=303)
    set_user(response, request.app.state.config.cookie_name, name)
    return response
