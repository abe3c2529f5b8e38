"""
Script para ejecutar la API REST de la bitácora

Este script inicia el servidor FastAPI con uvicorn.

Uso:
    bitacora-api                 # Modo desarrollo
    bitacora-api --production    # Modo producción
"""
import argparse

import uvicorn

APP_PATH = "bitacora.api.main:app"


def run_dev_server(port: int = 8000) -> None:
    """Ejecuta servidor en modo desarrollo con auto-reload"""
    print("=" * 80)
    print("Bitácora de Entrevistas - Development Server")
    print("=" * 80)
    print(f"Server: http://localhost:{port}")
    print(f"Swagger UI: http://localhost:{port}/docs")
    print("=" * 80)

    uvicorn.run(
        APP_PATH,
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info",
        access_log=True,
    )


def run_production_server(port: int = 8000, workers: int = 4) -> None:
    """Ejecuta servidor en modo producción"""
    print("=" * 80)
    print("Bitácora de Entrevistas - Production Server")
    print("=" * 80)
    print(f"Server: http://localhost:{port}")
    print("=" * 80)

    uvicorn.run(
        APP_PATH,
        host="0.0.0.0",
        port=port,
        reload=False,
        workers=workers,
        log_level="warning",
        access_log=True,
    )


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Run the interview log API server")
    parser.add_argument(
        "--production",
        action="store_true",
        help="Run in production mode (no auto-reload, multiple workers)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Worker processes in production mode (default: 4)",
    )
    args = parser.parse_args(argv)

    if args.production:
        run_production_server(args.port, args.workers)
    else:
        run_dev_server(args.port)


if __name__ == "__main__":
    main()
