from test.utils.fixtures import chalice_gateway, clean_storage  # noqa: F401
