import io
import json
import unittest
from contextlib import redirect_stdout

import run_sweep
from stylist.config import Settings
from stylist.dispatch import SweepResult


class _FakeSweep:
    def __init__(self, result=None, exc=None):
        self.result = result
        self.exc = exc
        self.hours = []

    def sweep(self, hour):
        self.hours.append(hour)
        if self.exc:
            raise self.exc
        return self.result


class TestRunSweep(unittest.TestCase):
    def setUp(self):
        self._orig_build = run_sweep.build_services
        self._orig_setup = run_sweep.setup_logging
        run_sweep.setup_logging = lambda **_kwargs: None

    def tearDown(self):
        run_sweep.build_services = self._orig_build
        run_sweep.setup_logging = self._orig_setup

    def _use(self, sweep):
        run_sweep.build_services = lambda _settings: type("Svc", (), {"sweep": sweep, "settings": Settings()})()

    def test_prints_counts(self):
        sweep = _FakeSweep(SweepResult(processed=2, errors=0, total_users=3))
        self._use(sweep)
        out = io.StringIO()
        with redirect_stdout(out):
            code = run_sweep.main(["--hour", "6"])
        self.assertEqual(code, 0)
        self.assertEqual(sweep.hours, [6])
        self.assertEqual(json.loads(out.getvalue()), {"processed": 2, "errors": 0, "totalUsers": 3})

    def test_errors_give_nonzero_exit(self):
        self._use(_FakeSweep(SweepResult(processed=1, errors=1, total_users=2)))
        with redirect_stdout(io.StringIO()):
            self.assertEqual(run_sweep.main(["--hour", "5"]), 2)

    def test_sweep_failure(self):
        self._use(_FakeSweep(exc=RuntimeError("database down")))
        self.assertEqual(run_sweep.main(["--hour", "5"]), 1)

    def test_rejects_bad_hour(self):
        with self.assertRaises(SystemExit):
            run_sweep.main(["--hour", "25"])


if __name__ == "__main__":
    unittest.main()
