"""
Upload files to SwissTransfer
"""
import asyncio
from swishpy import SwishClient, TransferParameters


async def main():
    async with SwishClient() as swish:

        # Simple upload with default parameters (30 days, 250 downloads)
        result = await swish.upload("document.pdf")
        print(f"Share link: {result.link}")

        # Several files in one transfer
        result = await swish.upload(["report.pdf", "slides.pptx"])
        print(f"Uploaded {len(result.files)} files: {result.link}")

        # Whole folder (regular files only, sorted by name)
        result = await swish.upload("./photos")
        print(f"Folder uploaded: {result.link}")

        # Custom parameters
        params = TransferParameters(
            duration=7,
            password="s3cret",
            message="Holiday pictures",
            number_of_downloads=10
        )
        result = await swish.upload("holiday.zip", params)
        print(f"Protected link: {result.link}")

        # Upload with progress callback
        def on_progress(progress):
            print(f"Progress: {progress.percentage:.1f}%")

        result = await swish.upload("large_file.zip", progress_callback=on_progress)
        print(f"Uploaded: {result.link}")


if __name__ == "__main__":
    asyncio.run(main())
