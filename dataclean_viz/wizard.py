# Wizard steps and the data carried between them
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

from .models import ChartConfig, DataRecord


class WizardStep(IntEnum):
    UPLOAD = 1
    CLEAN = 2
    DASHBOARD = 3


STEP_NAMES = {
    WizardStep.UPLOAD: "Upload Data",
    WizardStep.CLEAN: "Clean Data",
    WizardStep.DASHBOARD: "Generate Dashboard",
}


class InvalidTransitionError(RuntimeError):
    pass


@dataclass
class WizardState:
    step: WizardStep = WizardStep.UPLOAD
    raw_csv: str = ""
    file_name: str = ""
    cleaned_data: List[DataRecord] = field(default_factory=list)
    chart_configs: List[ChartConfig] = field(default_factory=list)
    # bumped whenever cleaned_data is replaced so derived views know to rebuild
    data_version: int = 0

    def _require(self, *steps: WizardStep) -> None:
        if self.step not in steps:
            allowed = ", ".join(STEP_NAMES[s] for s in steps)
            raise InvalidTransitionError(
                f"Cannot do that from '{STEP_NAMES[self.step]}' (expected {allowed})"
            )

    def file_uploaded(self, raw_csv: str, file_name: str) -> None:
        self._require(WizardStep.UPLOAD)
        self.raw_csv = raw_csv
        self.file_name = file_name
        self.step = WizardStep.CLEAN

    def data_cleaned(self, records: List[DataRecord]) -> None:
        self._require(WizardStep.CLEAN)
        self.cleaned_data = list(records)
        self.chart_configs = []
        self.data_version += 1
        self.step = WizardStep.DASHBOARD

    def dashboard_generated(self, configs: List[ChartConfig]) -> None:
        self._require(WizardStep.DASHBOARD)
        self.chart_configs = list(configs)

    def back_to_clean(self) -> None:
        self._require(WizardStep.DASHBOARD)
        self.step = WizardStep.CLEAN

    def reset(self) -> None:
        self.step = WizardStep.UPLOAD
        self.raw_csv = ""
        self.file_name = ""
        self.cleaned_data = []
        self.chart_configs = []
        self.data_version += 1
