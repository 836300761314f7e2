#!/usr/bin/env python3
"""
Startup script for the chat relay backend.

    python start.py          # API server on $PORT (default 3000)
    python start.py api      # same

Prints whether the selected provider's API key is configured (length only),
then execs uvicorn.
"""
import os
import sys


KEY_ENV_BY_PROVIDER = {
    "gemini": "GEMINI_API_KEY",
    "gemini-sdk": "GEMINI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}


def describe_key(env: dict) -> str:
    provider = (env.get("CHAT_PROVIDER") or "gemini").lower()
    var = KEY_ENV_BY_PROVIDER.get(provider)
    if var is None:
        return f"unknown provider {provider!r}"
    key = env.get(var)
    if not key:
        return f"{var} missing"
    return f"{var} configured (length: {len(key)})"


def build_api_command(port: str) -> list[str]:
    return [
        "uvicorn",
        "chatrelay.main:app",
        "--host", "0.0.0.0",
        "--port", str(port),
    ]


def run_api() -> None:
    port = os.environ.get("PORT", "3000")
    print(f"Starting chat relay (API) on port {port}")
    print(f"Environment check: provider={os.environ.get('CHAT_PROVIDER', 'gemini')}; {describe_key(dict(os.environ))}")
    cmd = build_api_command(port)
    print(f"Running command: {' '.join(cmd)}")
    os.execvp("uvicorn", cmd)


def main():
    role = sys.argv[1] if len(sys.argv) > 1 else "api"
    if role == "api":
        run_api()
    else:
        print(f"Unknown role {role!r}; expected 'api'")
        sys.exit(2)


if __name__ == "__main__":
    main()
