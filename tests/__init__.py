"""Test configuration and utilities for the APWine SDK."""

import logging
import sys
from pathlib import Path

# Add the src directory to the path so we can import the SDK modules
test_dir = Path(__file__).parent
project_dir = test_dir.parent
src_dir = project_dir / "src"
sys.path.insert(0, str(src_dir))

# Configure logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

# Suppress noisy logs during testing
logging.getLogger('aiohttp').setLevel(logging.WARNING)
logging.getLogger('web3').setLevel(logging.WARNING)
logging.getLogger('urllib3').setLevel(logging.WARNING)

# Test addresses for consistent testing
TEST_ADDRESSES = {
    'controller': '0xcccccccccccccccccccccccccccccccccccccccc',
    'future': '0x1111111111111111111111111111111111111111',
    'future_2': '0x1212121212121212121212121212121212121212',
    'pt': '0x2222222222222222222222222222222222222222',
    'fyt': '0x3333333333333333333333333333333333333333',
    'underlying': '0x4444444444444444444444444444444444444444',
    'lp_token': '0x5555555555555555555555555555555555555555',
    'spender': '0x6666666666666666666666666666666666666666',
    'user': '0x9999999999999999999999999999999999999999',
    'amm': '0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa',
    'amm_2': '0xabababababababababababababababababababab',
    'ibt': '0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb',
    'invalid': '0xinvalid'
}
