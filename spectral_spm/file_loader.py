import os
import json

import pandas as pd

from .errors import ConfigurationError
from .parameters import SPMParams, apply_overrides

OVERRIDE_COLUMNS = ['group', 'name', 'value']


def load_parameter_overrides(file_path):
    """
    Load parameter overrides from a CSV file.

    The file needs the columns ``group``, ``name`` and ``value``, e.g.::

        group,name,value
        cell,C_nom,2.0
        pos,D_s_ref,2e-14
        model,temperature_dependent,0

    Parameters:
    file_path (str): Path to the CSV file.

    Returns:
    dict: ``{group: {name: value}}`` ready for ``apply_overrides``.
    """
    file_path = os.path.normpath(file_path)
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"The file {file_path} does not exist.")

    try:
        df = pd.read_csv(file_path, comment='#', skipinitialspace=True)
    except pd.errors.ParserError as e:
        raise ConfigurationError(f"Could not parse {file_path}: {e}") from e

    missing = [col for col in OVERRIDE_COLUMNS if col not in df.columns]
    if missing:
        raise ConfigurationError(f"{file_path} is missing the column(s) {missing}")

    values = pd.to_numeric(df['value'], errors='coerce')
    bad = df.loc[values.isna(), 'name'].tolist()
    if bad:
        raise ConfigurationError(f"Non-numeric value(s) in {file_path} for {bad}")

    overrides = {}
    for group, name, value in zip(df['group'].str.strip(), df['name'].str.strip(), values):
        overrides.setdefault(group, {})[name] = float(value)
    return overrides


def load_parameters(file_path=None, base=None):
    """Default (or ``base``) parameters with the overrides of ``file_path`` applied."""
    params = base if base is not None else SPMParams()
    if file_path is None:
        return params.validate()
    return apply_overrides(params, load_parameter_overrides(file_path))


def save_results_csv(series, file_path, profiles=True):
    """Write a ResultSeries to CSV, one row per sample."""
    df = series.to_dataframe(profiles=profiles)
    df.to_csv(file_path)
    return file_path


def load_results_csv(file_path):
    """Read back a CSV written by ``save_results_csv`` as a DataFrame indexed by time."""
    file_path = os.path.normpath(file_path)
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"The file {file_path} does not exist.")
    return pd.read_csv(file_path, index_col='time')


def save_summary_json(summary, file_path):
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)
    return file_path
