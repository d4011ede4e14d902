"""Tests for the worker process transport."""

import json
import subprocess

import pytest

from kuadrat_pkg import config, worker
from kuadrat_pkg.solver import solve_quadratic
from kuadrat_pkg.types import Coefficients, TransportError, ValidationError
from kuadrat_pkg.worker import solve_in_worker, worker_solve_main


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr(worker.time, "sleep", lambda _delay: None)


def _fake_run(calls, outcome):
    def run(cmd, **kwargs):
        calls.append(cmd)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    return run


def test_worker_solves_in_child_process():
    result = solve_in_worker(Coefficients(1.0, -3.0, 2.0))
    assert result == solve_quadratic(1, -3, 2)


def test_worker_complex_roots():
    result = solve_in_worker(Coefficients(1.0, 0.0, 1.0))
    assert result.regime == "complex"
    assert result.solutions == ("0 + 1i", "0 - 1i")


def test_worker_main_decodes_payload():
    body = worker_solve_main(json.dumps({"a": 1, "b": 2, "c": 1}))
    assert body["status"] == "success"
    assert body["solutions"] == ["-1", "-1"]


def test_worker_main_rejects_huge_integer():
    body = worker_solve_main('{"a": 1' + "0" * 400 + ', "b": 1, "c": 1}')
    assert body["status"] == "error"
    assert body["code"] == "NON_FINITE"


def test_worker_main_rejects_bad_json():
    body = worker_solve_main("{not json")
    assert body == {
        "status": "error",
        "message": "Request body is not valid JSON",
        "code": "INVALID_REQUEST",
    }


def test_timeout_is_retried_then_reported(monkeypatch, no_sleep):
    calls = []
    monkeypatch.setattr(
        worker.subprocess,
        "run",
        _fake_run(calls, subprocess.TimeoutExpired(cmd="kuadrat", timeout=1)),
    )
    with pytest.raises(TransportError) as exc_info:
        solve_in_worker(Coefficients(1.0, 2.0, 3.0), timeout=1)
    assert exc_info.value.code == "TIMEOUT"
    assert exc_info.value.transient is True
    assert len(calls) == config.WORKER_RETRIES + 1


def test_launch_failure_is_comm_error(monkeypatch, no_sleep):
    calls = []
    monkeypatch.setattr(
        worker.subprocess, "run", _fake_run(calls, OSError("no such file"))
    )
    with pytest.raises(TransportError) as exc_info:
        solve_in_worker(Coefficients(1.0, 2.0, 3.0))
    assert exc_info.value.code == "COMM_ERROR"


def test_non_zero_exit_is_not_retried(monkeypatch, no_sleep):
    calls = []
    failed = subprocess.CompletedProcess(
        args=["kuadrat"], returncode=1, stdout=b"", stderr=b"Traceback"
    )
    monkeypatch.setattr(worker.subprocess, "run", _fake_run(calls, failed))
    with pytest.raises(TransportError) as exc_info:
        solve_in_worker(Coefficients(1.0, 2.0, 3.0))
    assert exc_info.value.code == "INVALID_OUTPUT"
    assert exc_info.value.transient is False
    assert len(calls) == 1


def test_garbage_output_is_invalid_output(monkeypatch):
    garbage = subprocess.CompletedProcess(
        args=["kuadrat"], returncode=0, stdout=b"hello", stderr=b""
    )
    monkeypatch.setattr(worker.subprocess, "run", _fake_run([], garbage))
    with pytest.raises(TransportError) as exc_info:
        solve_in_worker(Coefficients(1.0, 2.0, 3.0))
    assert exc_info.value.code == "INVALID_OUTPUT"


def test_error_body_is_validation_error(monkeypatch):
    body = {"status": "error", "message": "Coefficient a cannot be zero", "code": "LEADING_ZERO"}
    reply = subprocess.CompletedProcess(
        args=["kuadrat"], returncode=0, stdout=json.dumps(body).encode(), stderr=b""
    )
    monkeypatch.setattr(worker.subprocess, "run", _fake_run([], reply))
    with pytest.raises(ValidationError) as exc_info:
        solve_in_worker(Coefficients(1.0, 2.0, 3.0))
    assert exc_info.value.code == "LEADING_ZERO"


def test_retry_recovers_after_transient_failure(monkeypatch, no_sleep):
    body = solve_quadratic(1, -3, 2).to_dict()
    replies = [
        subprocess.TimeoutExpired(cmd="kuadrat", timeout=1),
        subprocess.CompletedProcess(
            args=["kuadrat"], returncode=0, stdout=json.dumps(body).encode(), stderr=b""
        ),
    ]

    def run(cmd, **kwargs):
        reply = replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    monkeypatch.setattr(worker.subprocess, "run", run)
    result = solve_in_worker(Coefficients(1.0, -3.0, 2.0))
    assert list(result.solutions) == body["solutions"]
    assert replies == []
