from dataclasses import dataclass


@dataclass
class CLIArgs:
    """
    Properties:
    - setting: Path to setting.yaml file.
    - init: Run init actions such as db migrations.
    """
    setting: str
    init: bool
