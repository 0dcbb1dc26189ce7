import pytest

KALC_VARIABLES = ("KALC_LOG_LEVEL", "KALC_PROMPT")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # Setting before deleting registers each variable with monkeypatch, so values
    # that load_dotenv writes during a test are undone afterwards too.
    for name in KALC_VARIABLES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")
