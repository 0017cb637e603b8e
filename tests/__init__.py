"""
Manifest core unit tests
"""

import unittest
from .test_api import ManifestTests, ManifestVersionValidatorTests
from .test_cli import LoggingFilterTests, SettingsTests, StandaloneCLITests
from .test_conditional import CacheHeaderTests, ClientResponseTests, OriginParameterTests, OriginQueryTests
from .test_etag import ValidatorCodecTests, ValidatorMatchingTests
from .test_negotiation import AcceptHeaderTests, VersionNegotiationTests
from .test_origin import OriginResponseTests, RecordClientTests
from .test_validation import InputValidationTests


TEST_CLASSES = [
    AcceptHeaderTests,
    CacheHeaderTests,
    ClientResponseTests,
    InputValidationTests,
    LoggingFilterTests,
    ManifestTests,
    ManifestVersionValidatorTests,
    OriginParameterTests,
    OriginQueryTests,
    OriginResponseTests,
    RecordClientTests,
    SettingsTests,
    StandaloneCLITests,
    ValidatorCodecTests,
    ValidatorMatchingTests,
    VersionNegotiationTests,
]


def get_suite() -> unittest.TestSuite:
    suite = unittest.TestSuite()
    for cls in TEST_CLASSES:
        for fixture in filter(lambda f: f.startswith("test_"), dir(cls)):
            suite.addTest(cls(fixture))
    return suite
