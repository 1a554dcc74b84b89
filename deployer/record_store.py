"""
Deployment Record Store
Writes deployment records to a JSON file when an output path is configured
"""

import os
import json
import tempfile
from loguru import logger

from .models import DeploymentResult


class DeploymentRecordStore:
    """
    Persists DeploymentResult records as JSON

    Records are keyed by network so that deployments to different
    networks can share one file.
    """

    def __init__(self, output_file: str):
        self.output_file = output_file

    def load(self) -> dict:
        if not os.path.exists(self.output_file):
            return {}

        with open(self.output_file, 'r') as f:
            data = json.load(f)

        return data if isinstance(data, dict) else {}

    def save(self, result: DeploymentResult) -> bool:
        """
        Save a deployment record

        Args:
            result: Confirmed deployment

        Returns:
            True if the file was written
        """
        try:
            records = self.load()

            previous = records.get(result.network)
            if isinstance(previous, dict):
                logger.info(
                    f"Replacing previous {result.network} deployment: "
                    f"{previous.get('contractAddress')}"
                )

            records[result.network] = result.to_dict()
            self._write(records)

            logger.success(f"Deployment info saved to {self.output_file}")
            return True

        except (OSError, ValueError) as e:
            logger.error(f"Error saving deployment info to {self.output_file}: {e}")
            return False

    def _write(self, records: dict):
        # Existing file is only replaced once the new content is fully written
        directory = os.path.dirname(os.path.abspath(self.output_file))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(records, f, indent=2)
            os.replace(tmp_path, self.output_file)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
