"""QuestFlow - expected-value quest planning for time-boxed play sessions."""

import logging

from dotenv import load_dotenv

__version__ = "1.0.0"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

load_dotenv()
