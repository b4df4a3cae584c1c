# FILE: tests/conftest.py

import pytest
import sys
import os
import logging

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

# ==============================================================================
# PYTEST CONFIGURATION & HOOKS
# ==============================================================================

def pytest_configure(config):
    """Configure pytest settings and markers."""
    config.addinivalue_line("markers", "unit: Pure unit tests with no external dependencies.")
    config.addinivalue_line("markers", "integration: Tests that run the full file-to-XML workflow.")

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment(pytestconfig):
    """Set up test environment with logging configuration."""
    # Use pytest's log_cli_level if available, otherwise default to INFO
    log_level = pytestconfig.getoption("log_cli_level") or "INFO"
    logging.basicConfig(
        level=log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s",
        stream=sys.stdout,
        force=True,
    )
    logging.info(f"Test logging configured with level: {log_level.upper()}")
    yield

# ==============================================================================
# TEST DATA
# ==============================================================================

# A fixed width ISA header: '*' at offset 3, '>' at 104, '~' at 105.
ISA_TEST = "ISA*00*          *00*          *ZZ*SENDERID       *ZZ*RECEIVERID     *091214*1200*U*00401*000000001*0*T*>~"
ISA_PROD = "ISA*00*          *00*          *ZZ*SENDERID       *ZZ*RECEIVERID     *091214*1200*U*00401*000000002*0*P*>~"

@pytest.fixture(scope="session")
def isa_test_header() -> str:
    return ISA_TEST

@pytest.fixture(scope="session")
def isa_prod_header() -> str:
    return ISA_PROD

@pytest.fixture(scope="session")
def valid_810_edi_string() -> str:
    """A single 810 invoice: one interchange, one group, one transaction set, one BIG segment."""
    return f"""
{ISA_TEST}
GS*IN*84863*6129330000*20091214*1200*1*X*004010~
ST*810*143~
BIG*20091214*28277779**3344~
SE*2*143~
GE*1*1~
IEA*1*000000001~
""".strip()

@pytest.fixture(scope="session")
def multi_group_edi_string() -> str:
    """
    Two functional groups.

    - Group 1: two 810 invoices (ST02 143718 and 143719), each with BIG/REF/N1 segments
    - Group 2: one 856 ship notice (ST02 0001)
    """
    return f"""
{ISA_PROD}
GS*IN*84863*6129330000*20091214*1200*1*X*004010~
ST*810*143718~
BIG*20091214*28277779**3344~
REF*IA*SANMAR~
N1*ST*333 2ND AVE*92*329~
SE*5*143718~
ST*810*143719~
BIG*20091215*28277780**3345~
REF*IA*ACME & SONS <EAST>~
SE*4*143719~
GE*2*1~
GS*SH*84863*6129330000*20091214*1200*2*X*004010~
ST*856*0001~
BSN*00*SHIP001*20091214*1200~
SE*3*0001~
GE*1*2~
IEA*2*000000002~
""".strip()
