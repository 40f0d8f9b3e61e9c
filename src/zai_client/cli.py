import argparse
import asyncio
import json
import sys

import httpx

from .auth import get_auth_token
from .config import Config, get_config, set_config
from .log import configure_logging
from .models import get_available_models
from .network import call_upstream_api, generate_request_ids


async def show_token() -> int:
    token = await get_auth_token()
    if not token:
        print("Warning: no token available (anonymous mode failed and ZAI_BACKUP_TOKEN is not set).", file=sys.stderr)
        return 1
    print(token)
    return 0


async def list_models(as_json: bool) -> int:
    models = await get_available_models()
    if as_json:
        print(json.dumps([m.model_dump(exclude_none=True) for m in models], indent=2, ensure_ascii=False))
    else:
        for m in models:
            print(f"{m.id}\t{m.name}\t{m.owned_by}")
    return 0


async def chat(prompt: str, model: str) -> int:
    config = get_config()
    chat_id, msg_id = generate_request_ids()
    request = {
        "stream": True,
        "model": model or config.primary_model,
        "messages": [{"role": "user", "content": prompt}],
        "chat_id": chat_id,
        "id": msg_id,
    }
    async with httpx.AsyncClient(follow_redirects=True) as client:
        token = await get_auth_token(client)
        resp = await call_upstream_api(client, request, chat_id, token)
        try:
            if not resp.is_success:
                body = await resp.aread()
                print(f"Error: Received status code {resp.status_code}", file=sys.stderr)
                print(body.decode("utf-8", errors="replace"), file=sys.stderr)
                return 1
            async for line in resp.aiter_lines():
                if line:
                    print(line)
        finally:
            await resp.aclose()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="zai-client", description="One-shot client for chat.z.ai")
    parser.add_argument("--config", help="Path to config.json")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("token", help="Print the auth token")

    models = sub.add_parser("models", help="List available models")
    models.add_argument("--json", action="store_true", help="Print as JSON")

    chat_cmd = sub.add_parser("chat", help="Send one prompt and print the raw stream")
    chat_cmd.add_argument("prompt")
    chat_cmd.add_argument("--model", default="", help="Model id (defaults to the primary model)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.config:
        set_config(Config(args.config))
    config = get_config()
    if args.debug:
        config.debug_logging = True
    configure_logging(config.debug_logging)

    if args.command == "token":
        return asyncio.run(show_token())
    if args.command == "models":
        return asyncio.run(list_models(args.json))
    return asyncio.run(chat(args.prompt, args.model))


if __name__ == "__main__":
    sys.exit(main())
