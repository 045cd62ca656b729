import pytest_asyncio
from rest_navigator.endpoints.entry import EntryEndpoint


@pytest_asyncio.fixture
async def entry():
    async with EntryEndpoint("http://localhost/") as endpoint:
        yield endpoint
