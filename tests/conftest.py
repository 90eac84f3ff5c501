import os

from clutchlib.conf import CONFIG_YAML_ENV_VAR, UNITTESTS_SETTINGS_FILEPATH
from clutchlib_cli.util import LoggingOptions, LoggingOutput, setup_logging

os.environ[CONFIG_YAML_ENV_VAR] = os.environ.get('CLUTCH_TEST_CONFIG_YAML', UNITTESTS_SETTINGS_FILEPATH)

# keep structlog from printing to stdout, some tests parse what commands print there
setup_logging(logging_output=LoggingOutput.NULL, logging_options=LoggingOptions(debug=False))
