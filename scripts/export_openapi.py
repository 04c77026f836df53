"""Write the OpenAPI document of the configured app to docs/openapi.json."""

from pathlib import Path

import orjson

from recipes_api.main import app


def main(output: Path = Path("docs/openapi.json")) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(orjson.dumps(app.openapi(), option=orjson.OPT_INDENT_2))


if __name__ == "__main__":
    main()
