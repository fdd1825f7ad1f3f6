"""
Browser landing page for the emailed reset link.

On phones it tries the app's deep link first; it always offers a form that
posts to ``/api/auth/reset-password``.
"""

import json
import re

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse

from autoclinic.core.config import settings
from autoclinic.services.email import build_reset_links

router = APIRouter(tags=["auth"])

_MOBILE_AGENT = re.compile(r"iphone|ipad|ipod|android")

_PAGE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>Reset Password - {app_name}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <style>
    body {{ font-family: system-ui, -apple-system, "Segoe UI", sans-serif; padding: 24px; background: #f7f7fb; }}
    .box {{ max-width: 420px; margin: 0 auto; background: #fff; border-radius: 12px; padding: 24px;
            box-shadow: 0 6px 18px rgba(0,0,0,0.06); }}
    h1 {{ font-size: 22px; margin-bottom: 12px; color: #1f1f1f; }}
    button {{ background-color: #6a0dad; color: #fff; border: none; padding: 10px 16px;
              border-radius: 8px; font-size: 15px; cursor: pointer; }}
    input[type="password"] {{ width: 100%; padding: 10px; margin: 8px 0; border-radius: 8px;
                              border: 1px solid #ddd; box-sizing: border-box; font-size: 14px; }}
    .muted {{ color: #555; font-size: 13px; margin-bottom: 12px; }}
    .status {{ font-size: 14px; margin-top: 10px; }}
    .status.error {{ color: #c00; }}
    .status.success {{ color: #0a8f3c; }}
  </style>
</head>
<body>
  <div class="box">
    <h1>Reset Password</h1>
    {body}
  </div>
  <script>
    const token = {token_json};
    const deepLink = {deep_link_json};
    const isMobile = {is_mobile};
    const strongRegex = /^(?=.*[a-z])(?=.*[A-Z])(?=.*\\d)(?=.*[@$!%*?&()[\\]{{}}^#_+=-])[A-Za-z\\d@$!%*?&()[\\]{{}}^#_+=-]{{8,}}$/;

    function openApp() {{
      if (!token) return;
      window.location.href = deepLink;
    }}

    async function submitReset() {{
      const status = document.getElementById("status");
      const password = (document.getElementById("password").value || "").trim();
      const confirm = (document.getElementById("passwordConfirm").value || "").trim();
      status.textContent = "";
      status.className = "status";

      if (!password || !confirm) {{
        status.textContent = "Both password fields are required.";
        status.classList.add("error");
        return;
      }}
      if (!strongRegex.test(password)) {{
        status.textContent = "Weak password. It must be at least 8 characters and include uppercase, lowercase, number, and special character.";
        status.classList.add("error");
        return;
      }}
      if (password !== confirm) {{
        status.textContent = "Passwords do not match.";
        status.classList.add("error");
        return;
      }}
      try {{
        const res = await fetch("/api/auth/reset-password", {{
          method: "POST",
          headers: {{ "Content-Type": "application/json" }},
          body: JSON.stringify({{ token, password }}),
        }});
        const data = await res.json();
        if (!res.ok) {{
          status.textContent = data.error || "Reset failed.";
          status.classList.add("error");
        }} else {{
          status.textContent = "Password reset successful. You can now close this page and log in.";
          status.classList.add("success");
        }}
      }} catch (err) {{
        status.textContent = "Something went wrong. Please try again.";
        status.classList.add("error");
      }}
    }}

    if (isMobile && token) {{
      setTimeout(openApp, 400);
    }}
  </script>
</body>
</html>
"""

_FORM = """
    <p class="muted">If you have the {app_name} app installed, we'll try to open it automatically.</p>
    <button type="button" onclick="openApp()">Open in App</button>
    <p class="muted" style="margin-top:10px;">If nothing happens, you can reset your password below in this browser.</p>
    <div style="margin-top:16px;">
      <label class="muted">New password</label>
      <input type="password" id="password" placeholder="Enter new password" />
      <label class="muted">Confirm new password</label>
      <input type="password" id="passwordConfirm" placeholder="Re-enter new password" />
      <button type="button" style="margin-top:10px;" onclick="submitReset()">Reset Password</button>
      <div id="status" class="status"></div>
    </div>
"""

_MISSING_TOKEN = '<p class="muted">Your reset link is missing a token. Please request a new reset email.</p>'


def _script_json(value: str) -> str:
    # keep "</script>" in the value from closing the tag
    return json.dumps(value).replace("</", "<\\/")


@router.get("/auth/reset-password", response_class=HTMLResponse)
def reset_password_page(request: Request, token: str = Query("")):
    user_agent = request.headers.get("user-agent", "").lower()
    deep_link, _web_link = build_reset_links(token)
    body = _FORM.format(app_name=settings.APP_NAME) if token else _MISSING_TOKEN
    return _PAGE.format(
        app_name=settings.APP_NAME,
        body=body,
        token_json=_script_json(token),
        deep_link_json=_script_json(deep_link),
        is_mobile="true" if _MOBILE_AGENT.search(user_agent) else "false",
    )
