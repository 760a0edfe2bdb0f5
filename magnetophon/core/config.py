"""
Application configuration for the Magnetophon activity monitor.

Provides environment-aware settings with conservative defaults. Recurrence,
estimation and trigger parameters are configurable so that a deployment can
fix its policy once and keep its baseline history consistent.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecurrenceConfig(BaseModel):
	"""
	Business-signal recurrence policy.

	Notes:
	- policy: 'toggle' (per-second exponential toggle decay) or 'summary'
	  (one blended sample per interval). Baselines built under one policy are
	  not comparable with the other.
	- decay: exponential decay constant per second (1/600 by default).
	- activity_metric: scalar used by the 'summary' policy, 'throughput'
	  (transmissions per hour times duty cycle) or 'fourth_root' of on-time.
	"""

	policy: str = Field("summary", description="Recurrence policy: 'toggle' or 'summary'")
	decay: float = Field(1.0 / 600, gt=0.0, lt=1.0)
	activity_metric: str = Field(
		"throughput",
		description="Activity metric for 'summary': 'throughput' or 'fourth_root'",
	)


class EstimatorConfig(BaseModel):
	"""
	Configuration for the expected-value estimator.

	Notes:
	- strategy: 'neighbor' interpolation or 'spectral' smoothing.
	- min_bucket_observations: observations an hourly bucket needs before it is
	  trusted. None derives it from the recurrence policy.
	- min_coverage_seconds: elapsed coverage before overall stats are trusted.
	- sentinel_value: artificially high mean/stdev used during cold start.
	"""

	strategy: str = Field("neighbor", description="Estimator: 'neighbor' or 'spectral'")
	min_bucket_observations: Optional[int] = Field(None, ge=1)
	min_coverage_seconds: float = Field(3600.0, ge=0.0)
	harmonics: int = Field(3, ge=0, le=11)
	sentinel_value: float = Field(1e9, gt=0.0)

	def bucket_observations(self, policy: str) -> int:
		if self.min_bucket_observations is not None:
			return self.min_bucket_observations
		# The per-second recurrence samples once a second, so an hour of coverage
		# is 3600 observations; the summary recurrence samples once per interval.
		return 3600 if policy == "toggle" else 1


class TriggerConfig(BaseModel):
	"""
	Notification trigger calibration.

	Rationale:
	- return_period_hours: desired average hours between notifications.
	- hysteresis_sigma: the trigger re-arms once business drops below
	  mean + hysteresis_sigma * stdev.
	"""

	return_period_hours: float = Field(24.0 * 7, gt=0.0)
	hysteresis_sigma: float = Field(1.0, ge=0.0)


class SnapshotConfig(BaseModel):
	"""
	Persistence schedule for the baseline curve.
	"""

	every_n_events: int = Field(10, ge=1)
	daily_dump: bool = True


class CaptureConfig(BaseModel):
	"""
	Level-gated capture front end.

	Notes:
	- rms_threshold: block standard deviation (int16 units) that counts as activity.
	- block_seconds: duration of each captured block.
	"""

	rms_threshold: float = Field(1000.0, gt=0.0)
	sample_rate: int = Field(44100, gt=0)
	block_seconds: float = Field(0.5, gt=0.0)


class PathsConfig(BaseModel):
	events_csv: Path = Path("magnetophon.csv")
	stats_csv: Path = Path("magnetophon.stats.csv")
	snapshot: Path = Path("magnetophon.baseline.npz")
	recordings_dir: Path = Path(".")


class NotifyConfig(BaseModel):
	command: Optional[str] = Field(
		"./magnetophon.command",
		description="Executable launched with the notable recording as its argument",
	)


class Config(BaseSettings):
	"""
	Global configuration with environment overrides.
	"""

	model_config = SettingsConfigDict(
		env_prefix="MAGNETOPHON_",
		env_file=".env",
		env_nested_delimiter="__",
		extra="ignore",
	)

	log_level: str = Field("INFO", description="Default logging level")
	logs_dir: Path = Field(Path("logs"), description="Directory for log files")
	recurrence: RecurrenceConfig = RecurrenceConfig()
	estimator: EstimatorConfig = EstimatorConfig()
	trigger: TriggerConfig = TriggerConfig()
	snapshot: SnapshotConfig = SnapshotConfig()
	capture: CaptureConfig = CaptureConfig()
	paths: PathsConfig = PathsConfig()
	notify: NotifyConfig = NotifyConfig()

	def model_post_init(self, __context: object) -> None:
		self.logs_dir.mkdir(parents=True, exist_ok=True)


config = Config()
