from cis_provider.core.app_factory import create_app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cis_provider.main:app", host="127.0.0.1", port=8000)
