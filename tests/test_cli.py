import os
import csv
import subprocess
import sys


def test_cli_run_writes_trajectory(tmp_path):
    out_csv = tmp_path / "out.csv"
    cmd = [sys.executable, "-m", "guerbetsim.cli", "run", "--k1", "0.5", "--k2", "0.5", "--k3", "0.2", "--k4", "0.1", "--tmax", "10", "--csv", str(out_csv)]
    subprocess.check_call(cmd, cwd=os.getcwd())
    assert out_csv.exists()
    with open(out_csv, newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "time"
    assert len(rows[0]) == 9
    assert len(rows) == 11
    assert float(rows[-1][0]) == 10.0


def test_cli_compare_prints_every_species():
    cmd = [sys.executable, "-m", "guerbetsim.cli", "compare", "--k1", "0.3", "--tmax", "5"]
    out = subprocess.check_output(cmd, cwd=os.getcwd(), text=True)
    lines = [line.split() for line in out.strip().splitlines()]
    assert [parts[0] for parts in lines][:3] == ["C2_OH", "C4_OH", "C6_OH"]
    assert len(lines) == 8


def test_cli_rejects_negative_constant():
    cmd = [sys.executable, "-m", "guerbetsim.cli", "run", "--k1", "-1"]
    res = subprocess.run(cmd, cwd=os.getcwd(), capture_output=True, text=True)
    assert res.returncode != 0


def test_cli_compare_with_sub_decimal_sampling():
    cmd = [sys.executable, "-m", "guerbetsim.cli", "compare", "--k1", "0.3", "--tmax", "1", "--sample", "0.05"]
    out = subprocess.check_output(cmd, cwd=os.getcwd(), text=True)
    assert len(out.strip().splitlines()) == 8


def test_cli_run_writes_exact_sample_times(tmp_path):
    out_csv = tmp_path / "quarter.csv"
    cmd = [sys.executable, "-m", "guerbetsim.cli", "run", "--k1", "0.5", "--tmax", "1", "--sample", "0.25", "--csv", str(out_csv)]
    subprocess.check_call(cmd, cwd=os.getcwd())
    with open(out_csv, newline="") as f:
        times = [float(row[0]) for row in list(csv.reader(f))[1:]]
    assert [round(t, 9) for t in times] == [0.25, 0.5, 0.75, 1.0]
