"""
Advanced configuration
"""
import asyncio
import logging

from swishpy import SwishClient, APIConfig, RetryConfig, ScanPollConfig, setup_logging


async def main():
    logging.basicConfig(level=logging.INFO)
    setup_logging(logging.INFO)

    # Through a proxy, with fewer retries
    config = SwishClient.create_config(proxy="http://proxy:8080", max_retries=1)
    async with SwishClient(config) as swish:
        result = await swish.upload("document.pdf")
        print(result.link)

    # Full configuration: parallel chunk upload and a shorter virus-scan wait
    config = APIConfig(
        max_parallel_chunks=4,
        retry=RetryConfig(max_retries=5, base_delay=1.0),
        scan_poll=ScanPollConfig(initial_delay=2.0, timeout=120.0),
    )
    async with SwishClient(config) as swish:
        result = await swish.upload("large_file.zip")
        paths = await swish.download(result.link, dest="./roundtrip")
        print(paths)


if __name__ == "__main__":
    asyncio.run(main())
