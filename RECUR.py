#!/usr/bin/env python3
# ==============================================================================
# RECUR
# Recurrence Ensemble Comparison for prostate-surgery cohorts
#
# Fits several logistic models for biochemical recurrence over different
# covariate subsets, averages their per-patient risks into an ensemble and
# compares discrimination (ROC AUC) across models and ensemble.
# ==============================================================================

VERSION = "1.0.0"  # RECUR version for audit and reproducibility

import argparse
import hashlib
import hmac
import json
import os
import platform  # For reproducibility fingerprinting
import re
import secrets
import sys
import time
import warnings
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np  # type: ignore
import pandas as pd

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import seaborn as sns  # noqa: E402
import statsmodels.api as sm  # type: ignore # noqa: E402
from statsmodels.tools.sm_exceptions import (  # type: ignore # noqa: E402
    PerfectSeparationWarning,
)
from patsy import build_design_matrices, dmatrices  # type: ignore # noqa: E402
from scipy.special import expit  # type: ignore # noqa: E402
from sklearn.metrics import (  # type: ignore[import-untyped] # noqa: E402
    roc_auc_score,
    roc_curve,
)

"""
RECUR: discrimination of single-model and ensemble recurrence risk

References:
[1] Hanley JA, McNeil BJ. The meaning and use of the area under a receiver
    operating characteristic (ROC) curve. Radiology 1982;143(1):29-36.
[2] Steyerberg EW. Clinical Prediction Models. 2nd ed. Springer, 2019.
[3] Efron B, Tibshirani R. An Introduction to the Bootstrap. Chapman & Hall, 1993.
"""

# ---------------------------
# Configuration
# ---------------------------

RANDOM_STATE = 42
OUTPUT_ROOT_DEFAULT = os.environ.get("RECUR_OUTPUT_ROOT", "RECUR_OUTPUT")
BOOTSTRAP_N_DEFAULT = 1000
BOOTSTRAP_MIN_N = 50  # Below this the percentile CI is not reported
BOOTSTRAP_MIN_PER_CLASS = 5
REFERENCE_COHORT_N = 316

OUTCOME_COLUMN = "Recurrence"
ENSEMBLE_COLUMN = "p_ensemble"
PREDICTION_PREFIX = "p_"

# Source spellings seen in exported cohort files -> formula-safe canonical names
COLUMN_ALIASES = {
    "T.Stage": "TStage",
    "BN+": "BN_positive",
    "BN.": "BN_positive",
    "Organ.Confined": "OrganConfined",
    "Preop.PSA": "PreopPSA",
}

EXPECTED_COLUMNS = [
    "Age",
    "FamHx",
    "TStage",
    "bGS",
    "TVol",
    "PVol",
    "BN_positive",
    "OrganConfined",
    "PreopPSA",
    "PreopTherapy",
    "AnyAdjTherapy",
    "AdjRadTherapy",
    OUTCOME_COLUMN,
]

DESCRIPTIVE_NUMERIC_DEFAULT = ["Age"]
DESCRIPTIVE_CATEGORICAL_DEFAULT = ["FamHx", "TStage", "bGS", OUTCOME_COLUMN]


# ---------------------------
# Errors
# ---------------------------


class RecurError(Exception):
    """Base class for analysis errors reported back to the user."""


class MissingColumnError(RecurError, KeyError):
    def __init__(self, model_id: str, column: str):
        self.model_id = model_id
        self.column = column
        super().__init__(f"model '{model_id}': column '{column}' not found in table")

    def __str__(self) -> str:
        return self.args[0]


class NonBinaryOutcomeError(RecurError, ValueError):
    def __init__(self, column: str, levels: Sequence[Any], model_id: str = ""):
        self.column = column
        self.levels = list(levels)
        self.model_id = model_id
        prefix = f"model '{model_id}': " if model_id else ""
        shown = ", ".join(str(v) for v in self.levels[:10])
        super().__init__(
            f"{prefix}outcome '{column}' is not binary "
            f"({len(self.levels)} distinct values: {shown})"
        )


class ModelFitError(RecurError, RuntimeError):
    def __init__(self, model_id: str, reason: str):
        self.model_id = model_id
        self.reason = reason
        super().__init__(f"model '{model_id}': fit failed ({reason})")


class DegenerateOutcomeError(RecurError, ValueError):
    """AUC is undefined without at least one positive and one negative case."""

    def __init__(self, label: str, n_pos: int, n_neg: int):
        self.label = label
        self.n_pos = n_pos
        self.n_neg = n_neg
        super().__init__(
            f"'{label}': AUC undefined with {n_pos} positive and {n_neg} negative cases"
        )


# ---------------------------
# Model specifications
# ---------------------------


class CovariateSpec(NamedTuple):
    name: str
    categorical: bool = False


class ModelSpec(NamedTuple):
    model_id: str
    label: str
    covariates: Tuple[CovariateSpec, ...]

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.covariates]


DEFAULT_MODEL_SPECS: Tuple[ModelSpec, ...] = (
    ModelSpec(
        "clinical",
        "Gleason score + preoperative PSA",
        (CovariateSpec("bGS", True), CovariateSpec("PreopPSA")),
    ),
    ModelSpec(
        "demographic",
        "Age + family history + tumor stage",
        (
            CovariateSpec("Age"),
            CovariateSpec("FamHx", True),
            CovariateSpec("TStage", True),
        ),
    ),
    ModelSpec(
        "pathology",
        "Tumor/prostate volume + nodes + organ confinement",
        (
            CovariateSpec("TVol"),
            CovariateSpec("PVol"),
            CovariateSpec("BN_positive"),
            CovariateSpec("OrganConfined"),
        ),
    ),
    ModelSpec(
        "treatment",
        "Preoperative PSA + pre/adjuvant therapy",
        (
            CovariateSpec("PreopPSA"),
            CovariateSpec("PreopTherapy"),
            CovariateSpec("AnyAdjTherapy"),
            CovariateSpec("AdjRadTherapy"),
        ),
    ),
    ModelSpec(
        "combined",
        "Age + Gleason + stage + PSA + tumor volume",
        (
            CovariateSpec("Age"),
            CovariateSpec("bGS", True),
            CovariateSpec("TStage", True),
            CovariateSpec("PreopPSA"),
            CovariateSpec("TVol"),
        ),
    ),
)


def parse_model_specs(raw: Sequence[Dict[str, Any]]) -> List[ModelSpec]:
    """
    Build ModelSpecs from config dicts.

    Each entry looks like {"id": "clinical", "label": "...", "covariates":
    [{"name": "bGS", "categorical": true}, "PreopPSA"]}; a bare string is a
    numeric covariate.
    """
    specs: List[ModelSpec] = []
    seen = set()
    for i, entry in enumerate(raw, 1):
        model_id = str(entry.get("id") or f"model{i}")
        if model_id in seen:
            raise ValueError(f"duplicate model id '{model_id}' in configuration")
        seen.add(model_id)
        covs = []
        for c in entry.get("covariates", []):
            if isinstance(c, str):
                covs.append(CovariateSpec(c))
            else:
                covs.append(
                    CovariateSpec(str(c["name"]), bool(c.get("categorical", False)))
                )
        if not covs:
            raise ValueError(f"model '{model_id}' has no covariates")
        specs.append(ModelSpec(model_id, str(entry.get("label", model_id)), tuple(covs)))
    return specs


# ---------------------------
# Utilities
# ---------------------------


def now_ts() -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S")


def safe_name(s: str) -> str:
    s = re.sub(r"[^a-zA-Z0-9._-]+", "_", str(s)).strip("_")
    return s[:120] if s else "dataset"


SUPPORTED_EXTENSIONS = {".csv", ".tsv", ".txt", ".xlsx", ".xls"}


def sniff_sep(path: Path) -> str:
    """Auto-detect delimiter for text-based tabular files."""
    with open(path, "r", errors="ignore") as f:
        head = f.readline()
    if "\t" in head and "," not in head:
        return "\t"
    if ";" in head and "," not in head:
        return ";"
    return ","


def write_csv(path: Path, df: pd.DataFrame):
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)


def write_json(path: Path, obj: Dict[str, Any]):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False, default=str)


def get_versions() -> Dict[str, str]:
    import patsy as _patsy
    import scipy as _sp
    import sklearn as _sk
    import statsmodels as _sm

    return {
        "python": sys.version.replace("\n", " "),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "scipy": _sp.__version__,
        "sklearn": _sk.__version__,
        "statsmodels": _sm.__version__,
        "patsy": _patsy.__version__,
        "matplotlib": matplotlib.__version__,
        "seaborn": sns.__version__,
        "os_system": platform.system(),
        "os_release": platform.release(),
        "machine": platform.machine(),
    }


# ---------------------------
# Audit log (JSONL)
# ---------------------------


def _generate_session_key() -> Tuple[str, str]:
    """
    Return (display_key, secret_hex) for one analysis session.

    The display key (16 uppercase hex chars) tags every log entry and output;
    the 256-bit secret only lives in memory and keys the integrity HMAC.
    """
    secret = secrets.token_bytes(32)
    display = hashlib.sha256(secret).hexdigest()[:16].upper()
    return display, secret.hex()


def _compute_log_integrity_hash(entries: List[Dict[str, Any]], secret_hex: str) -> str:
    """HMAC-SHA256 over all entries, serialized in deterministic key order."""
    serialized = json.dumps(entries, sort_keys=True, ensure_ascii=False, default=str)
    return (
        hmac.new(
            key=bytes.fromhex(secret_hex),
            msg=serialized.encode("utf-8"),
            digestmod=hashlib.sha256,
        )
        .hexdigest()
        .upper()
    )


class AuditLog:
    """
    Append-only audit trail of one analysis run.

    Every entry is one JSON line with a timestamp, an event name, a details
    dict, the session key and a sequence number. finalize_session() appends
    an HMAC-SHA256 seal computed over all earlier entries, so any later edit
    to the file is detectable by whoever holds the session secret.
    """

    def __init__(self, jsonl_path: Path):
        self.jsonl_path = Path(jsonl_path)
        self.jsonl_path.parent.mkdir(parents=True, exist_ok=True)

        self.session_key, self._secret_hex = _generate_session_key()
        self.session_start = now_ts()
        self.log_count = 0
        self._entries: List[Dict[str, Any]] = []

        self._write_entry(
            "SESSION_INIT",
            {
                "session_key": self.session_key,
                "session_start": self.session_start,
                "recur_version": VERSION,
            },
        )

    def _write_entry(self, event: str, details: Optional[Dict[str, Any]] = None):
        self.log_count += 1
        entry = {
            "ts": now_ts(),
            "event": event,
            "details": details or {},
            "session_key": self.session_key,
            "log_sequence": self.log_count,
        }
        self._entries.append(entry)

        with open(self.jsonl_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")
        return entry

    def log(self, event: str, details: Optional[Dict[str, Any]] = None):
        """Log an event with full audit trail."""
        return self._write_entry(event, details)

    @property
    def entries(self) -> List[Dict[str, Any]]:
        return list(self._entries)

    def finalize_session(self) -> Dict[str, Any]:
        integrity_hash = _compute_log_integrity_hash(self._entries, self._secret_hex)
        summary = {
            "session_key": self.session_key,
            "session_start": self.session_start,
            "session_end": now_ts(),
            "total_entries": self.log_count,
            "integrity_hash": integrity_hash,
            "integrity_algorithm": "HMAC-SHA256",
        }
        self._write_entry(
            "SESSION_FINALIZED",
            {
                "integrity_hash": integrity_hash,
                "integrity_algorithm": "HMAC-SHA256",
                "total_entries": self.log_count,
            },
        )
        return summary

    def verify(self) -> bool:
        """Recompute the seal over the sealed entries and compare."""
        sealed = [e for e in self._entries if e["event"] != "SESSION_FINALIZED"]
        finals = [e for e in self._entries if e["event"] == "SESSION_FINALIZED"]
        if not finals:
            return False
        expected = finals[-1]["details"]["integrity_hash"]
        n = finals[-1]["log_sequence"] - 1
        actual = _compute_log_integrity_hash(sealed[:n], self._secret_hex)
        return hmac.compare_digest(expected, actual)


# ---------------------------
# Data loading
# ---------------------------


def normalize_column_names(df: pd.DataFrame) -> pd.DataFrame:
    """
    Map source spellings onto canonical, formula-safe column names.

    Raises ValueError when two source columns map onto the same name.
    """
    renamed = {}
    sources: Dict[str, List[str]] = {}
    for c in df.columns:
        name = str(c).strip()
        if name in COLUMN_ALIASES:
            name = COLUMN_ALIASES[name]
        else:
            name = re.sub(r"[^0-9a-zA-Z_]+", "_", name).strip("_") or name
        renamed[c] = name
        sources.setdefault(name, []).append(str(c))
    clashes = {k: v for k, v in sources.items() if len(v) > 1}
    if clashes:
        detail = "; ".join(f"{v} -> '{k}'" for k, v in clashes.items())
        raise ValueError(f"Columns collide after renaming: {detail}")
    return df.rename(columns=renamed)


def smart_read_file(path: Path, audit: Optional[AuditLog] = None) -> pd.DataFrame:
    """
    Read a tabular file (CSV, TSV, TXT or Excel) into a DataFrame.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"Unsupported file type '{suffix}' "
            f"(expected one of {sorted(SUPPORTED_EXTENSIONS)})"
        )

    if suffix in {".xlsx", ".xls"}:
        engine = "openpyxl" if suffix == ".xlsx" else "xlrd"
        if audit:
            audit.log("READING_EXCEL", {"file": str(path), "format": suffix})
        return pd.read_excel(path, engine=engine)

    sep = sniff_sep(path)
    if audit:
        audit.log("READING_TEXT", {"file": str(path), "sep": sep})
    return pd.read_csv(path, sep=sep, na_values=["NA", "", "."], low_memory=False)


def load_patient_table(path: Path, audit: Optional[AuditLog] = None) -> pd.DataFrame:
    """Load the cohort file and normalise its column names."""
    df = normalize_column_names(smart_read_file(path, audit))
    missing = [c for c in EXPECTED_COLUMNS if c not in df.columns]
    if audit:
        audit.log(
            "DATA_LOADED",
            {
                "rows": int(len(df)),
                "cols": int(df.shape[1]),
                "expected_columns_missing": missing,
            },
        )
    if missing:
        print(f"   Warning: expected columns not found: {', '.join(missing)}")
    if len(df) < REFERENCE_COHORT_N:
        print(
            f"   Note: {len(df)} rows (reference cohort has {REFERENCE_COHORT_N})"
        )
    return df


class SyntheticDataGenerator:
    """
    Generate synthetic prostatectomy cohorts with the reference column layout.
    """

    @staticmethod
    def generate_prostate_cohort(
        n_samples: int = REFERENCE_COHORT_N,
        missing_rate: float = 0.02,
        source_names: bool = False,
        random_state: int = RANDOM_STATE,
    ) -> pd.DataFrame:
        """
        Generate a prostatectomy cohort with a recurrence outcome.

        Args:
            n_samples: Number of patients
            missing_rate: Fraction of missing values in PreopPSA, PVol and TVol
            source_names: Use export spellings ('T.Stage', 'BN+') for columns
            random_state: Random seed

        Returns:
            DataFrame with the expected columns and 'Recurrence' as outcome
        """
        rng = np.random.RandomState(random_state)
        n = n_samples

        age = np.clip(rng.normal(61.0, 6.5, n), 38, 79).round(1)
        famhx = rng.binomial(1, 0.2, n)
        tstage = rng.choice([1, 2], n, p=[0.8, 0.2])
        bgs = rng.choice([1, 2, 3], n, p=[0.2, 0.63, 0.17])
        tvol = rng.choice([1, 2, 3], n, p=[0.3, 0.5, 0.2])
        pvol = np.round(rng.lognormal(np.log(50), 0.35, n), 1)
        preop_psa = np.round(rng.lognormal(np.log(6.5), 0.55, n), 2)
        bn_positive = rng.binomial(1, 0.05, n)
        organ_confined = rng.binomial(1, np.where(tstage == 2, 0.4, 0.65))
        preop_therapy = rng.binomial(1, 0.1, n)
        any_adj = rng.binomial(1, 0.15, n)
        adj_rad = any_adj * rng.binomial(1, 0.5, n)

        lp = (
            -4.2
            + 0.9 * (bgs == 2)
            + 1.9 * (bgs == 3)
            + 0.08 * preop_psa
            + 0.6 * (tstage == 2)
            + 0.35 * tvol
            + 1.2 * bn_positive
            - 0.5 * organ_confined
            + 0.01 * (age - 61)
        )
        recurrence = rng.binomial(1, expit(lp))

        df = pd.DataFrame(
            {
                "Age": age,
                "FamHx": famhx,
                "PVol": pvol,
                "TVol": tvol.astype(float),
                "TStage": tstage,
                "bGS": bgs,
                "BN_positive": bn_positive,
                "OrganConfined": organ_confined,
                "PreopPSA": preop_psa,
                "PreopTherapy": preop_therapy,
                "AnyAdjTherapy": any_adj,
                "AdjRadTherapy": adj_rad,
                OUTCOME_COLUMN: recurrence,
            }
        )

        if missing_rate > 0:
            for col in ["PreopPSA", "PVol", "TVol"]:
                mask = rng.random_sample(n) < missing_rate
                df.loc[mask, col] = np.nan

        if source_names:
            df = df.rename(columns={"TStage": "T.Stage", "BN_positive": "BN+"})
        return df


# ---------------------------
# Descriptive tables
# ---------------------------


def profile_dataset(df: pd.DataFrame) -> Dict[str, Any]:
    prof = {
        "rows": int(len(df)),
        "cols": int(df.shape[1]),
        "missing_cells": int(df.isnull().sum().sum()),
        "missing_pct": float((df.isnull().sum().sum() / max(1, df.size)) * 100),
    }
    num_cols = df.select_dtypes(include=[np.number]).columns.tolist()
    prof["numeric_cols"] = int(len(num_cols))
    prof["object_cols"] = int(df.shape[1] - len(num_cols))
    return prof


def describe_numeric(df: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """Mean, SD and quartiles for each numeric column present in df."""
    rows = []
    for c in columns:
        if c not in df.columns:
            continue
        s = pd.to_numeric(df[c], errors="coerce")
        has = s.notna().any()
        rows.append(
            {
                "col": c,
                "n": int(s.notna().sum()),
                "mean": float(s.mean()) if has else np.nan,
                "sd": float(s.std()) if has else np.nan,
                "min": float(s.min()) if has else np.nan,
                "q1": float(s.quantile(0.25)) if has else np.nan,
                "median": float(s.median()) if has else np.nan,
                "q3": float(s.quantile(0.75)) if has else np.nan,
                "max": float(s.max()) if has else np.nan,
                "missing": int(s.isnull().sum()),
            }
        )
    return pd.DataFrame(
        rows,
        columns=["col", "n", "mean", "sd", "min", "q1", "median", "q3", "max", "missing"],
    )


def frequency_table(s: pd.Series) -> pd.DataFrame:
    counts = s.value_counts(dropna=False, sort=False)
    try:
        counts = counts.sort_index()
    except TypeError:
        pass
    out = pd.DataFrame(
        {
            "level": ["Missing" if pd.isna(k) else str(k) for k in counts.index],
            "n": counts.values.astype(int),
        }
    )
    out["pct"] = out["n"] / max(1, len(s)) * 100
    return out


# ---------------------------
# Outcome handling
# ---------------------------


def normalize_binary_target(y: pd.Series) -> Optional[pd.Series]:
    """
    Coerce a two-level column to 0/1 floats, keeping NaN where y is missing.

    Numeric {0, 1} and booleans map directly. Any other numeric pair maps the
    smaller value to 0; a pair of labels maps the lower sorted label to 0. A
    single label outside {0, 1} codes every present row as 0, leaving the
    degenerate case to the caller. Returns None when y has more than 2
    levels; an all-missing y stays all-missing.
    """
    u = pd.Series(y.dropna().unique())
    if u.empty:
        return pd.Series(np.nan, index=y.index, dtype=float)
    if u.nunique() > 2:
        return None
    if u.map(lambda v: isinstance(v, (bool, np.bool_))).all():
        return y.map(lambda v: np.nan if pd.isna(v) else float(bool(v)))
    try:
        num = pd.to_numeric(u, errors="raise")
    except (ValueError, TypeError):
        num = None
    if num is not None and set(num.tolist()).issubset({0, 1}):
        return pd.to_numeric(y, errors="coerce").astype(float)
    n_levels = num.nunique() if num is not None else u.nunique()
    if n_levels == 1:
        return y.map(lambda v: np.nan if pd.isna(v) else 0.0)
    if num is not None:
        y_num = pd.to_numeric(y, errors="coerce").astype(float)
        return (y_num == num.max()).astype(float).where(y_num.notna())
    vals = sorted(u.astype(str).unique())
    mapper = {vals[0]: 0.0, vals[-1]: 1.0}
    return y.map(lambda v: np.nan if pd.isna(v) else mapper[str(v)])


# ---------------------------
# Model fitting and prediction
# ---------------------------


def _term(cov: CovariateSpec) -> str:
    return f'C(Q("{cov.name}"))' if cov.categorical else f'Q("{cov.name}")'


def _readable_param(name: str) -> str:
    name = re.sub(r'C\(Q\("([^"]+)"\)\)', r"\1", name)
    return re.sub(r'Q\("([^"]+)"\)', r"\1", name)


class FittedModel:
    """
    Coefficients of one maximum-likelihood logistic model.

    Holds everything needed to score new rows: the covariate specification,
    the patsy design of the fitted terms and the coefficient vector. The
    coefficient table reports odds ratios with 95% Wald intervals.
    """

    def __init__(
        self,
        spec: ModelSpec,
        outcome: str,
        params: pd.Series,
        design_info: Any,
        levels: Dict[str, List[Any]],
        coef_table: pd.DataFrame,
        n_obs: int,
        n_events: int,
        converged: bool,
        llf: float,
    ):
        self._spec = spec
        self._outcome = outcome
        self._params = params.copy()
        self._design_info = design_info
        self._levels = {k: list(v) for k, v in levels.items()}
        self._coef_table = coef_table.copy()
        self.n_obs = n_obs
        self.n_events = n_events
        self.converged = converged
        self.llf = llf

    @property
    def model_id(self) -> str:
        return self._spec.model_id

    @property
    def spec(self) -> ModelSpec:
        return self._spec

    @property
    def outcome(self) -> str:
        return self._outcome

    @property
    def params(self) -> pd.Series:
        return self._params.copy()

    @property
    def design_info(self) -> Any:
        return self._design_info

    @property
    def levels(self) -> Dict[str, List[Any]]:
        return {k: list(v) for k, v in self._levels.items()}

    def coefficient_table(self) -> pd.DataFrame:
        return self._coef_table.copy()

    def __repr__(self) -> str:
        return (
            f"FittedModel({self.model_id!r}, n={self.n_obs}, events={self.n_events}, "
            f"terms={len(self._params)})"
        )


def fit_logistic_model(
    df: pd.DataFrame,
    outcome: str,
    covariates: Sequence[CovariateSpec],
    model_id: str = "model",
    label: Optional[str] = None,
    audit: Optional[AuditLog] = None,
) -> FittedModel:
    """
    Fit logit(P(outcome = 1)) = b0 + sum(b_j * x_j) by maximum likelihood.

    Categorical covariates are treatment-coded with their first sorted level
    as reference. Rows missing the outcome or any covariate are left out of
    the fit; df itself is not modified.

    Raises:
        MissingColumnError: outcome or a covariate is not a column of df
        NonBinaryOutcomeError: outcome has more than two levels
        ModelFitError: no complete rows, a single outcome class, a singular
            design or perfect separation (the MLE does not exist)
    """
    covariates = tuple(covariates)
    spec = ModelSpec(model_id, label or model_id, covariates)
    if not covariates:
        raise ModelFitError(model_id, "no covariates specified")
    for name in [outcome] + spec.column_names:
        if name not in df.columns:
            raise MissingColumnError(model_id, name)

    y = normalize_binary_target(df[outcome])
    if y is None:
        raise NonBinaryOutcomeError(outcome, df[outcome].dropna().unique(), model_id)

    used = list(dict.fromkeys(spec.column_names))
    work = df[used].copy()
    work[outcome] = y
    work = work.dropna()
    n_obs = int(len(work))
    n_events = int(work[outcome].sum()) if n_obs else 0
    if n_obs == 0:
        raise ModelFitError(model_id, "no complete rows")
    if n_events == 0 or n_events == n_obs:
        raise ModelFitError(
            model_id, f"outcome has a single class among {n_obs} complete rows"
        )

    levels = {
        c.name: sorted(work[c.name].unique().tolist())
        for c in covariates
        if c.categorical
    }
    formula = f'Q("{outcome}") ~ ' + " + ".join(_term(c) for c in covariates)

    def fail(reason: str) -> ModelFitError:
        if audit:
            audit.log("MODEL_FIT_FAILED", {"model_id": model_id, "error": reason})
        return ModelFitError(model_id, reason)

    try:
        y_mat, X = dmatrices(formula, work, return_type="dataframe")
    except Exception as e:
        raise fail(str(e)) from e

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            res = sm.Logit(y_mat, X).fit(method="newton", maxiter=100, disp=False)
        except Exception as e:
            raise fail(str(e)) from e

    if not np.all(np.isfinite(res.params.values)):
        raise fail("non-finite coefficients")

    # Complete separation: the MLE does not exist and the coefficients diverge.
    separated = any(
        issubclass(w.category, PerfectSeparationWarning) for w in caught
    ) or np.allclose(res.predict(X), y_mat.iloc[:, 0].values, rtol=0, atol=1e-6)
    if separated:
        raise fail("perfect separation of the outcome by the covariates")

    converged = bool(res.mle_retvals.get("converged", False))
    fit_warnings = sorted({str(w.message) for w in caught})

    ci = res.conf_int()
    coef_table = pd.DataFrame(
        {
            "term": [_readable_param(p) for p in res.params.index],
            "coef": res.params.values,
            "se": res.bse.values,
            "odds_ratio": np.exp(res.params.values),
            "or_ci_low": np.exp(ci.iloc[:, 0].values),
            "or_ci_high": np.exp(ci.iloc[:, 1].values),
            "p_value": res.pvalues.values,
        }
    )

    if audit:
        audit.log(
            "MODEL_FITTED",
            {
                "model_id": model_id,
                "formula": formula,
                "n_obs": n_obs,
                "n_events": n_events,
                "n_params": int(len(res.params)),
                "converged": converged,
                "llf": float(res.llf),
                "warnings": fit_warnings,
            },
        )

    return FittedModel(
        spec=spec,
        outcome=outcome,
        params=res.params,
        design_info=X.design_info,
        levels=levels,
        coef_table=coef_table,
        n_obs=n_obs,
        n_events=n_events,
        converged=converged,
        llf=float(res.llf),
    )


def predict_risk(model: FittedModel, df: pd.DataFrame) -> pd.Series:
    """
    Predicted P(outcome = 1) for every row of df, NaN where a covariate is
    missing or a categorical level was not seen during fitting.
    """
    for name in model.spec.column_names:
        if name not in df.columns:
            raise MissingColumnError(model.model_id, name)

    cols = list(dict.fromkeys(model.spec.column_names))
    complete = df[cols].notna().all(axis=1)
    for name, lv in model.levels.items():
        complete &= df[name].isin(lv)

    out = pd.Series(
        np.nan, index=df.index, dtype=float, name=f"{PREDICTION_PREFIX}{model.model_id}"
    )
    if not complete.any():
        return out

    sub = df.loc[complete, cols]
    (X,) = build_design_matrices([model.design_info], sub, return_type="dataframe")
    eta = X.values @ model.params.reindex(X.columns).values
    out[complete.values] = expit(eta)
    return out


def append_column(df: pd.DataFrame, name: str, values: pd.Series) -> pd.DataFrame:
    """Return df with one new column; existing columns are never overwritten."""
    if name in df.columns:
        raise ValueError(f"column '{name}' already exists")
    if len(values) != len(df):
        raise ValueError(f"column '{name}' has {len(values)} values for {len(df)} rows")
    out = df.copy()
    out[name] = values.values if isinstance(values, pd.Series) else values
    return out


# ---------------------------
# Ensemble
# ---------------------------


def ensemble_mean(df: pd.DataFrame, columns: Sequence[str]) -> pd.Series:
    """
    Row-wise mean over whichever of the prediction columns are present.

    A row with 3 of 5 models available averages those 3; a row with none
    available stays NaN.
    """
    if not columns:
        raise ValueError("ensemble needs at least one prediction column")
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise MissingColumnError("ensemble", missing[0])
    block = df[list(columns)].apply(pd.to_numeric, errors="coerce")
    return block.mean(axis=1, skipna=True).rename(ENSEMBLE_COLUMN)


# ---------------------------
# ROC / AUC
# ---------------------------


class RocResult(NamedTuple):
    label: str
    fpr: np.ndarray
    tpr: np.ndarray
    thresholds: np.ndarray
    auc: float
    n: int
    n_pos: int
    n_neg: int
    ci_low: float = float("nan")
    ci_high: float = float("nan")

    def points(self) -> pd.DataFrame:
        return pd.DataFrame(
            {"threshold": self.thresholds, "fpr": self.fpr, "tpr": self.tpr}
        )


def _as_outcome(y_true, label: str) -> pd.Series:
    y = pd.Series(y_true).reset_index(drop=True)
    y01 = normalize_binary_target(y)
    if y01 is None:
        raise NonBinaryOutcomeError(str(y.name or label), y.dropna().unique())
    return pd.to_numeric(y01, errors="coerce").astype(float)


def _as_scores(y_prob) -> pd.Series:
    p = pd.to_numeric(pd.Series(y_prob).reset_index(drop=True), errors="coerce")
    return p.astype(float)


def _paired_complete(y_true, y_prob, label: str) -> Tuple[np.ndarray, np.ndarray]:
    y = _as_outcome(y_true, label)
    p = _as_scores(y_prob)
    if len(y) != len(p):
        raise ValueError(f"'{label}': {len(y)} outcomes for {len(p)} scores")
    keep = (y.notna() & p.notna()).values
    return y.values[keep].astype(int), p.values[keep]


def bootstrap_auc_ci(
    y_true: np.ndarray,
    y_prob: np.ndarray,
    n_bootstrap: int = BOOTSTRAP_N_DEFAULT,
    ci: float = 0.95,
) -> Tuple[float, float]:
    """
    Stratified percentile bootstrap CI for AUC.

    Positives and negatives are resampled separately so every replicate has
    both classes. NaN when n < 50 or either class has fewer than 5 cases.
    """
    y_true = np.asarray(y_true).astype(int)
    y_prob = np.asarray(y_prob).astype(float)

    if len(y_true) < BOOTSTRAP_MIN_N or n_bootstrap <= 0:
        return float("nan"), float("nan")
    idx_pos = np.where(y_true == 1)[0]
    idx_neg = np.where(y_true == 0)[0]
    if len(idx_pos) < BOOTSTRAP_MIN_PER_CLASS or len(idx_neg) < BOOTSTRAP_MIN_PER_CLASS:
        return float("nan"), float("nan")

    rng = np.random.RandomState(RANDOM_STATE)
    aucs = np.empty(n_bootstrap)
    for b in range(n_bootstrap):
        idx = np.concatenate(
            [
                rng.choice(idx_pos, size=len(idx_pos), replace=True),
                rng.choice(idx_neg, size=len(idx_neg), replace=True),
            ]
        )
        aucs[b] = roc_auc_score(y_true[idx], y_prob[idx])
    alpha = (1.0 - ci) / 2.0
    low, high = np.percentile(aucs, [alpha * 100.0, (1.0 - alpha) * 100.0])
    return float(low), float(high)


def evaluate_roc(
    y_true,
    y_prob,
    label: str = "score",
    n_bootstrap: int = 0,
) -> RocResult:
    """
    ROC curve and AUC of one probability column against a binary outcome.

    Rows where either value is missing are dropped. Thresholds sweep the
    distinct predicted values (score >= threshold is positive), so tied
    scores share a single curve point and the trapezoidal AUC gives a tied
    positive/negative pair half credit.

    Raises:
        DegenerateOutcomeError: fewer than one positive or one negative case
    """
    y, p = _paired_complete(y_true, y_prob, label)
    n_pos = int((y == 1).sum())
    n_neg = int((y == 0).sum())
    if n_pos < 1 or n_neg < 1:
        raise DegenerateOutcomeError(label, n_pos, n_neg)

    fpr, tpr, thresholds = roc_curve(y, p, drop_intermediate=False)
    auc = float(roc_auc_score(y, p))
    ci_low, ci_high = float("nan"), float("nan")
    if n_bootstrap:
        ci_low, ci_high = bootstrap_auc_ci(y, p, n_bootstrap=n_bootstrap)
    return RocResult(
        label, fpr, tpr, thresholds, auc, int(len(y)), n_pos, n_neg, ci_low, ci_high
    )


def bootstrap_auc_difference(
    y_true,
    p_a,
    p_b,
    n_bootstrap: int = BOOTSTRAP_N_DEFAULT,
    ci: float = 0.95,
) -> Dict[str, float]:
    """
    AUC(a) - AUC(b) on rows scored by both, with a paired stratified
    bootstrap percentile interval (descriptive, no multiplicity control).
    """
    y = _as_outcome(y_true, "paired comparison")
    a = _as_scores(p_a)
    b = _as_scores(p_b)
    if not len(y) == len(a) == len(b):
        raise ValueError("paired comparison needs equal-length inputs")
    keep = (y.notna() & a.notna() & b.notna()).values
    y = y.values[keep].astype(int)
    a = a.values[keep]
    b = b.values[keep]

    n_pos, n_neg = int((y == 1).sum()), int((y == 0).sum())
    if n_pos < 1 or n_neg < 1:
        raise DegenerateOutcomeError("paired comparison", n_pos, n_neg)

    diff = float(roc_auc_score(y, a) - roc_auc_score(y, b))
    out = {
        "n": int(len(y)),
        "auc_diff": diff,
        "ci_low": float("nan"),
        "ci_high": float("nan"),
    }
    if (
        len(y) < BOOTSTRAP_MIN_N
        or n_pos < BOOTSTRAP_MIN_PER_CLASS
        or n_neg < BOOTSTRAP_MIN_PER_CLASS
        or n_bootstrap <= 0
    ):
        return out

    idx_pos = np.where(y == 1)[0]
    idx_neg = np.where(y == 0)[0]
    rng = np.random.RandomState(RANDOM_STATE)
    diffs = np.empty(n_bootstrap)
    for i in range(n_bootstrap):
        idx = np.concatenate(
            [
                rng.choice(idx_pos, size=len(idx_pos), replace=True),
                rng.choice(idx_neg, size=len(idx_neg), replace=True),
            ]
        )
        diffs[i] = roc_auc_score(y[idx], a[idx]) - roc_auc_score(y[idx], b[idx])
    alpha = (1.0 - ci) / 2.0
    low, high = np.percentile(diffs, [alpha * 100.0, (1.0 - alpha) * 100.0])
    out["ci_low"], out["ci_high"] = float(low), float(high)
    return out


# ---------------------------
# Plots
# ---------------------------


def save_roc_comparison(results: Sequence[RocResult], outpath: Path):
    """Overlay ROC curves of all models and the ensemble."""
    fig, ax = plt.subplots(figsize=(7, 7))
    palette = sns.color_palette("tab10", max(1, len(results)))
    for color, r in zip(palette, results):
        is_ensemble = r.label == "ensemble"
        ax.plot(
            r.fpr,
            r.tpr,
            color="black" if is_ensemble else color,
            lw=2.5 if is_ensemble else 1.5,
            label=f"{r.label} (AUC = {r.auc:.3f})",
        )
    ax.plot([0, 1], [0, 1], color="gray", lw=1, linestyle="--", label="Chance")
    ax.set_xlim([0.0, 1.0])
    ax.set_ylim([0.0, 1.05])
    ax.set_xlabel("False Positive Rate")
    ax.set_ylabel("True Positive Rate")
    ax.set_title("ROC Curves: Recurrence Models and Ensemble")
    ax.legend(loc="lower right", fontsize=8)
    ax.grid(alpha=0.3)

    outpath.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(outpath, dpi=250, bbox_inches="tight")
    plt.close(fig)


def save_target_distribution_plot(y: pd.Series, outpath: Path, target_name: str):
    """Bar chart of outcome counts with percentages."""
    counts = y.dropna().value_counts().sort_index()
    if counts.empty:
        return
    fig, ax = plt.subplots(figsize=(6, 5))
    bars = ax.bar(
        counts.index.astype(str),
        counts.values,
        color=["#3498db", "#e74c3c"][: len(counts)] or None,
        edgecolor="black",
        alpha=0.8,
    )
    total = max(1, int(counts.sum()))
    for bar, count in zip(bars, counts.values):
        ax.text(
            bar.get_x() + bar.get_width() / 2,
            bar.get_height() + counts.max() * 0.02,
            f"{count}\n({count / total * 100:.1f}%)",
            ha="center",
            va="bottom",
            fontsize=10,
        )
    ax.set_xlabel(target_name)
    ax.set_ylabel("Count")
    ax.set_title(f"Outcome Distribution: {target_name}")
    ax.grid(axis="y", alpha=0.3)
    fig.tight_layout()

    outpath.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(outpath, dpi=250, bbox_inches="tight")
    plt.close(fig)


# ---------------------------
# Report rendering
# ---------------------------


def render_table(title: str, df: pd.DataFrame, floatfmt: str = "{:.3f}") -> str:
    if df.empty:
        return f"{title}\n  (empty)\n"
    body = df.to_string(
        index=False,
        float_format=lambda v: floatfmt.format(v),
    )
    return f"{title}\n{'-' * len(title)}\n{body}\n"


def build_descriptive_report(
    df: pd.DataFrame,
    numeric_cols: Sequence[str] = DESCRIPTIVE_NUMERIC_DEFAULT,
    categorical_cols: Sequence[str] = DESCRIPTIVE_CATEGORICAL_DEFAULT,
) -> Tuple[pd.DataFrame, Dict[str, pd.DataFrame]]:
    numeric = describe_numeric(df, numeric_cols)
    freqs = {c: frequency_table(df[c]) for c in categorical_cols if c in df.columns}
    return numeric, freqs


def auc_comparison_table(results: Sequence[RocResult]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "model": r.label,
                "n": r.n,
                "n_events": r.n_pos,
                "auc": r.auc,
                "auc_ci_low": r.ci_low,
                "auc_ci_high": r.ci_high,
            }
            for r in results
        ],
        columns=["model", "n", "n_events", "auc", "auc_ci_low", "auc_ci_high"],
    )


# ---------------------------
# Pipeline
# ---------------------------


def load_session_config(path: Optional[Path]) -> Dict[str, Any]:
    if path is None:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg = json.load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"config file {path} must contain a JSON object")
    return cfg


def run_recur_analysis(
    filepath: Optional[Path],
    output_root: Path,
    session_config: Optional[Dict[str, Any]] = None,
    df: Optional[pd.DataFrame] = None,
    dataset_name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Load -> describe -> fit/predict each model -> ensemble -> ROC/AUC.

    A model that cannot be fitted is reported and skipped; the ensemble then
    averages the models that were fitted. Either filepath or df must be given.
    """
    cfg = dict(session_config or {})
    outcome = cfg.get("outcome", OUTCOME_COLUMN)
    if cfg.get("models"):
        specs = parse_model_specs(cfg["models"])
    else:
        specs = list(DEFAULT_MODEL_SPECS)
    n_bootstrap = int(cfg.get("bootstrap_n", BOOTSTRAP_N_DEFAULT))
    make_plots = bool(cfg.get("make_plots", True))

    if df is None and filepath is None:
        raise ValueError("either filepath or df is required")
    name = safe_name(dataset_name or (Path(filepath).stem if filepath else "cohort"))
    out_dir = Path(output_root) / f"{name}_Recurrence"
    tables_dir = out_dir / "Tables"
    charts_dir = out_dir / "Charts"
    tables_dir.mkdir(parents=True, exist_ok=True)
    charts_dir.mkdir(parents=True, exist_ok=True)

    audit = AuditLog(out_dir / "RECUR_AUDIT_LOG.jsonl")
    audit.log(
        "RUN_START",
        {
            "input_file": str(filepath) if filepath else None,
            "output_dir": str(out_dir),
            "versions": get_versions(),
            "outcome": outcome,
            "models": [
                {"id": s.model_id, "covariates": [c._asdict() for c in s.covariates]}
                for s in specs
            ],
            "bootstrap_n": n_bootstrap,
            "session_config": cfg,
        },
    )

    print(f"\n{'=' * 70}\nRECUR Analysis: {name}\n{'=' * 70}")
    print(f"Session Key: {audit.session_key}")
    print("-" * 70)

    if df is None:
        table = load_patient_table(Path(filepath), audit)
    else:
        table = normalize_column_names(df.copy())
        audit.log(
            "DATA_LOADED",
            {"rows": int(len(table)), "cols": int(table.shape[1]), "source": "dataframe"},
        )

    audit.log("DATA_PROFILE", profile_dataset(table))

    # Descriptive report
    numeric_desc, freqs = build_descriptive_report(
        table,
        cfg.get("descriptive_numeric", DESCRIPTIVE_NUMERIC_DEFAULT),
        cfg.get("descriptive_columns", DESCRIPTIVE_CATEGORICAL_DEFAULT),
    )
    print(render_table("Numeric summary", numeric_desc, "{:.2f}"))
    write_csv(tables_dir / "Descriptives_Numeric.csv", numeric_desc)
    for col, ft in freqs.items():
        print(render_table(f"Frequency: {col}", ft, "{:.1f}"))
        write_csv(tables_dir / f"Frequency_{safe_name(col)}.csv", ft)
    audit.log(
        "DESCRIPTIVES_WRITTEN",
        {"numeric": list(numeric_desc["col"]), "categorical": list(freqs)},
    )

    if make_plots and outcome in table.columns:
        save_target_distribution_plot(
            table[outcome], charts_dir / "Recurrence_Distribution.png", outcome
        )

    # Fit and score each model
    fitted: Dict[str, FittedModel] = {}
    failures: List[Dict[str, Any]] = []
    pred_cols: List[str] = []
    for spec in specs:
        print(f" Fitting model '{spec.model_id}': {spec.label}")
        try:
            model = fit_logistic_model(
                table, outcome, spec.covariates, spec.model_id, spec.label, audit
            )
        except RecurError as e:
            print(f"   ERROR: {e}")
            failures.append(
                {
                    "model_id": spec.model_id,
                    "error_type": type(e).__name__,
                    "column": getattr(e, "column", None),
                    "message": str(e),
                }
            )
            audit.log("MODEL_SKIPPED", failures[-1])
            continue

        if not model.converged:
            print(f"   Warning: '{spec.model_id}' did not converge")
        fitted[spec.model_id] = model
        coef = model.coefficient_table()
        write_csv(tables_dir / f"Coefficients_{safe_name(spec.model_id)}.csv", coef)
        title = (
            f"Coefficients: {spec.model_id} "
            f"(n={model.n_obs}, events={model.n_events})"
        )
        print(render_table(title, coef))

        col = f"{PREDICTION_PREFIX}{spec.model_id}"
        risk = predict_risk(model, table)
        table = append_column(table, col, risk)
        pred_cols.append(col)
        audit.log(
            "PREDICTIONS_ADDED",
            {
                "model_id": spec.model_id,
                "column": col,
                "n_missing": int(risk.isna().sum()),
            },
        )

    if not pred_cols:
        audit.log(
            "RUN_FAILED", {"reason": "no model could be fitted", "failures": failures}
        )
        audit.finalize_session()
        return {
            "status": "failed",
            "output_dir": str(out_dir),
            "failures": failures,
            "session_key": audit.session_key,
        }

    table = append_column(table, ENSEMBLE_COLUMN, ensemble_mean(table, pred_cols))
    audit.log(
        "ENSEMBLE_ADDED",
        {
            "members": pred_cols,
            "n_missing": int(table[ENSEMBLE_COLUMN].isna().sum()),
        },
    )

    # Evaluate
    roc_results: List[RocResult] = []
    auc_failures: List[Dict[str, Any]] = []
    for col in pred_cols + [ENSEMBLE_COLUMN]:
        label = col[len(PREDICTION_PREFIX):]
        try:
            r = evaluate_roc(
                table[outcome], table[col], label=label, n_bootstrap=n_bootstrap
            )
        except DegenerateOutcomeError as e:
            print(f"   ERROR: {e}")
            auc_failures.append(
                {"label": label, "n_pos": e.n_pos, "n_neg": e.n_neg, "message": str(e)}
            )
            audit.log("AUC_FAILED", auc_failures[-1])
            continue
        roc_results.append(r)
        write_csv(tables_dir / f"ROC_{safe_name(label)}.csv", r.points())
        audit.log(
            "AUC_COMPUTED",
            {
                "label": label,
                "auc": r.auc,
                "n": r.n,
                "n_pos": r.n_pos,
                "ci": [r.ci_low, r.ci_high],
            },
        )

    auc_table = auc_comparison_table(roc_results)
    write_csv(tables_dir / "AUC_Comparison.csv", auc_table)
    print(render_table("AUC comparison", auc_table))

    comparisons = []
    if any(r.label == "ensemble" for r in roc_results):
        for col in pred_cols:
            try:
                d = bootstrap_auc_difference(
                    table[outcome], table[ENSEMBLE_COLUMN], table[col], n_bootstrap
                )
            except DegenerateOutcomeError:
                continue
            label = col[len(PREDICTION_PREFIX):]
            comparisons.append({"comparison": f"ensemble - {label}", **d})
    comparison_table = pd.DataFrame(comparisons)
    if not comparison_table.empty:
        write_csv(tables_dir / "AUC_Differences_vs_Ensemble.csv", comparison_table)
        print(
            render_table(
                "AUC difference, ensemble vs model (paired bootstrap)", comparison_table
            )
        )

    keep_cols = [outcome] + pred_cols + [ENSEMBLE_COLUMN]
    keep_cols = [c for c in keep_cols if c in table.columns]
    write_csv(tables_dir / "Predictions.csv", table[keep_cols])

    if make_plots and roc_results:
        save_roc_comparison(roc_results, charts_dir / "ROC_Comparison.png")

    summary = audit.finalize_session()
    write_json(
        out_dir / "run_summary.json",
        {
            "dataset": name,
            "session": summary,
            "auc": auc_table.to_dict(orient="records"),
            "failures": failures,
            "auc_failures": auc_failures,
        },
    )

    return {
        "status": "success",
        "output_dir": str(out_dir),
        "session_key": audit.session_key,
        "table": table,
        "models": fitted,
        "roc": {r.label: r for r in roc_results},
        "auc_table": auc_table,
        "comparisons": comparison_table,
        "failures": failures,
        "auc_failures": auc_failures,
        "descriptives": {"numeric": numeric_desc, "frequencies": freqs},
    }


# ---------------------------
# CLI
# ---------------------------


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="recur",
        description=(
            "Compare ROC AUC of logistic recurrence models and their averaged ensemble."
        ),
    )
    p.add_argument(
        "data", nargs="?", type=Path, help="cohort file (CSV, TSV, TXT or Excel)"
    )
    p.add_argument(
        "--synthetic", action="store_true", help="run on a generated 316-patient cohort"
    )
    p.add_argument(
        "--output", type=Path, default=Path(OUTPUT_ROOT_DEFAULT), help="output root folder"
    )
    p.add_argument(
        "--config", type=Path, default=None, help="JSON session config (outcome, models)"
    )
    p.add_argument(
        "--bootstrap", type=int, default=None, help="bootstrap replicates (0 = off)"
    )
    p.add_argument("--no-plots", action="store_true", help="skip PNG charts")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.data is None and not args.synthetic:
        print("No input given: pass a data file or --synthetic.")
        return 2

    np.random.seed(RANDOM_STATE)
    sns.set_theme(style="white", context="paper", font_scale=1.15)
    print("=" * 70 + "\nRECUR: recurrence model ensemble comparison\n" + "=" * 70)

    cfg = load_session_config(args.config)
    if args.bootstrap is not None:
        cfg["bootstrap_n"] = args.bootstrap
    if args.no_plots:
        cfg["make_plots"] = False

    output_root = args.output.expanduser().resolve()
    output_root.mkdir(parents=True, exist_ok=True)

    if args.synthetic:
        result = run_recur_analysis(
            None,
            output_root,
            cfg,
            df=SyntheticDataGenerator.generate_prostate_cohort(),
            dataset_name="synthetic_prostate",
        )
    else:
        result = run_recur_analysis(args.data.expanduser(), output_root, cfg)

    print(
        "=" * 70
        + f"\nRUN {result['status'].upper()}\nResults folder: {result['output_dir']}\n"
        + "=" * 70
    )
    return 0 if result["status"] == "success" else 1


if __name__ == "__main__":
    sys.exit(main())
