def test_import_package_and_version_smoke():
    import restforce

    assert isinstance(restforce.__version__, str)
    assert restforce.Restforce is not None


def test_exceptions_share_base():
    from restforce import (
        AuthenticationError,
        ConfigurationError,
        RestforceError,
        TransportError,
        UpstreamError,
    )

    for exc in (AuthenticationError, ConfigurationError, TransportError, UpstreamError):
        assert issubclass(exc, RestforceError)
