from __future__ import annotations

import os

import uvicorn


def main() -> None:
    host = os.getenv("CEP_GATEWAY_HOST", "0.0.0.0")
    port = int(os.getenv("CEP_GATEWAY_PORT", "8081"))
    uvicorn.run("cep_gateway.app:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
