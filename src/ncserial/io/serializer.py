# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 ncserial developers

"""
Batch serialization of a NetCDF file.

Orchestrates the conversion of one NetCDF file into flat binary records:
  1. Resolve the variable list (explicit names or a configured category)
  2. Read the file's time axis once
  3. Write the latitude and longitude as LAT1D / LON1D records
  4. Write the shared DIMS dimension file
  5. Serialize every requested variable with the file times
  6. Optionally read each record back and compare it with the source
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from ncserial.codec.dimension_file import LAT_TAG, LON_TAG, write_dimension_file
from ncserial.codec.time_codec import read_file_times
from ncserial.codec.variable_record import read_variable, write_variable
from ncserial.core.config import SerializerConfig
from ncserial.core.exceptions import ConfigurationError, ProviderError, ncserial_error_handler
from ncserial.core.timing import TimingMixin

from .provider import DatasetProvider, XarrayDatasetProvider

DIMENSION_FILE_NAME = 'DIMS'


@dataclass
class SerializationSummary:
    """Outcome of one batch run."""

    variables: List[str]
    written: Dict[str, Path] = field(default_factory=dict)
    matches: Dict[str, bool] = field(default_factory=dict)
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def all_match(self) -> bool:
        return all(self.matches.values())


def default_output_pattern(input_file: Path) -> str:
    """``<dir>/<stem>.{name}.bin`` next to the input file."""
    input_file = Path(input_file)
    return str(input_file.parent / f"{input_file.stem}.{{name}}.bin")


class NetcdfSerializer(TimingMixin):
    """Serializes the variables of one NetCDF file into binary records.

    Args:
        input_file: NetCDF file to read
        config: Serializer settings (defaults used if None)
        output_pattern: Output path pattern with a ``{name}`` placeholder;
            overrides ``config.output_pattern``
        logger: Logger instance (module logger if None)
    """

    def __init__(
        self,
        input_file: Union[Path, str],
        config: Optional[SerializerConfig] = None,
        output_pattern: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.input_file = Path(input_file)
        self.config = config or SerializerConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.output_pattern = (
            output_pattern
            or self.config.output_pattern
            or default_output_pattern(self.input_file)
        )
        if '{name}' not in self.output_pattern:
            raise ConfigurationError(
                f"Output pattern '{self.output_pattern}' has no {{name}} placeholder"
            )

    def output_path(self, name: str) -> Path:
        return Path(self.output_pattern.format(name=name))

    def resolve_variables(
        self,
        variables: Optional[Sequence[str]] = None,
        category: Optional[str] = None,
    ) -> List[str]:
        """Return the explicit variable list, or the one configured for ``category``."""
        if variables:
            return list(variables)
        if category:
            return self.config.variables_for(category)
        raise ConfigurationError(
            "Variable list not provided and no file category given; "
            "explicit variable list needed"
        )

    def run(
        self,
        variables: Optional[Sequence[str]] = None,
        category: Optional[str] = None,
    ) -> SerializationSummary:
        """Open the input file and serialize the requested variables."""
        names = self.resolve_variables(variables, category)
        with XarrayDatasetProvider(
            self.input_file, mask_and_scale=self.config.mask_and_scale
        ) as provider:
            return self.serialize_provider(provider, names)

    def serialize_provider(
        self,
        provider: DatasetProvider,
        names: Sequence[str],
    ) -> SerializationSummary:
        """Serialize ``names`` from an already open provider."""
        cfg = self.config
        summary = SerializationSummary(variables=list(names))
        self.timings.clear()
        self.logger.info(
            "Beginning serialization of %d variables in %s", len(names), self.input_file
        )
        self.logger.info("Data will be stored in files named %s", self.output_path('VARIABLE'))

        with ncserial_error_handler("reading file times", error_type=ProviderError):
            file_times = read_file_times(provider, cfg.time_variable)

        lats = lons = None
        if cfg.write_coordinates or cfg.write_dimension_file:
            lats = provider.get_array(cfg.lat_variable)
            lons = provider.get_array(cfg.lon_variable)

        if cfg.write_coordinates:
            for tag, var_name, values in ((LAT_TAG, cfg.lat_variable, lats),
                                          (LON_TAG, cfg.lon_variable, lons)):
                summary.written[tag] = write_variable(self.output_path(tag), var_name, values, 1)
            self.logger.info(
                "Longitudes and latitudes stored in %s and %s",
                summary.written[LON_TAG], summary.written[LAT_TAG],
            )

        if cfg.write_dimension_file:
            level_count = None
            if hasattr(provider, 'dimension_size'):
                level_count = provider.dimension_size(cfg.level_dimension)
            summary.written[DIMENSION_FILE_NAME] = write_dimension_file(
                self.output_path(DIMENSION_FILE_NAME),
                times=file_times,
                level_count=level_count,
                lats=lats,
                lons=lons,
            )

        for name in names:
            rank = provider.rank(name)
            times = file_times if rank > 1 else None
            path = self.output_path(name)
            with self.time_limit(f"serialize {name}", 'serialize'):
                write_variable(path, name, provider.get_array(name), rank, times)
            summary.written[name] = path
            self.logger.info("Serialized %s (rank %d) to %s", name, rank, path)

            if cfg.verify:
                summary.matches[name] = self.verify_variable(provider, name, rank, path)

        summary.timings = dict(self.timings)
        self._report(summary)
        return summary

    def verify_variable(
        self,
        provider: DatasetProvider,
        name: str,
        rank: int,
        path: Path,
    ) -> bool:
        """Read a record back and compare it bit-exactly with the source array."""
        with self.time_limit(f"re-read {name}", 'deserialize'):
            record = read_variable(path, rank=rank)
        with self.time_limit(f"NetCDF read {name}", 'netcdf_read'):
            source = provider.get_array(name)

        expected = np.ascontiguousarray(source, dtype=np.float32)
        match = (
            expected.shape == record.data.shape
            and np.array_equal(expected.view(np.uint32), record.data.view(np.uint32))
        )
        self.logger.info("Match of %s for binary read: %s", name, match)
        return match

    def _report(self, summary: SerializationSummary) -> None:
        n_vars = max(len(summary.variables), 1)
        timings = summary.timings
        self.logger.info(
            "Read and serialization completed in %.2f seconds per variable",
            timings.get('serialize', 0.0) / n_vars,
        )
        if not summary.matches:
            return

        reread = timings.get('deserialize', 0.0) / n_vars
        nc_read = timings.get('netcdf_read', 0.0) / n_vars
        self.logger.info("Serial data re-read in %.2f seconds per variable", reread)
        self.logger.info("NetCDF re-read in %.2f seconds per variable", nc_read)
        if reread > 0 and nc_read > 0:
            self.logger.info(
                "Speedup: %.2fx (%.2f%% time saving)",
                nc_read / reread, 100.0 * (1.0 - reread / nc_read),
            )
        if not summary.all_match:
            mismatched = [n for n, ok in summary.matches.items() if not ok]
            self.logger.warning("Binary records differ from source for: %s", mismatched)
