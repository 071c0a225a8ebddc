"""
Download files from a SwissTransfer link
"""
import asyncio
from swishpy import SwishClient, PasswordRequiredError

LINK = "https://www.swisstransfer.com/d/3215702a-bed4-4cec-9eb6-d731048a2312"


async def main():
    async with SwishClient() as swish:

        # Inspect the link first
        try:
            manifest = await swish.resolve(LINK)
        except PasswordRequiredError:
            manifest = await swish.resolve(LINK, password="s3cret")

        for remote_file in manifest.files:
            print(remote_file)

        # Download every file to the current directory
        paths = await swish.download(LINK)
        print(f"Downloaded: {paths}")

        # Download to a specific directory with progress
        def on_progress(progress):
            print(f"Progress: {progress.percentage:.1f}%")

        paths = await swish.download(LINK, dest="./downloads", progress_callback=on_progress)
        print(f"Done: {paths}")

        # Protected link
        paths = await swish.download(LINK, password="s3cret", dest="./downloads")
        print(f"Downloaded: {paths}")


if __name__ == "__main__":
    asyncio.run(main())
