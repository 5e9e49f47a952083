import pytest

from tools import valuestore as valuestore_tool


class FakeSyllabusClient:
    def __init__(self):
        self.study_path_params = None

    async def get_school_types(self):
        return [{"code": "GR"}, {"code": "GY"}]

    async def get_expired_school_types(self):
        return [{"code": "GYAN"}]

    async def get_types_of_syllabus(self):
        return [{"code": "SUBJECT_SYLLABUS"}]

    async def get_subject_and_course_codes(self):
        return [{"code": "MAT"}]

    async def get_study_path_codes(self, params=None):
        self.study_path_params = params
        return [{"code": "NA"}]

    async def get_api_info(self):
        return {"version": "1.0"}


@pytest.mark.asyncio
async def test_school_types_with_and_without_expired(dummy_mcp):
    valuestore_tool.register(dummy_mcp, syllabus_client=FakeSyllabusClient())
    fn = dummy_mcp.tools["get_school_types"]

    active_only = await fn()
    with_expired = await fn(include_expired=True)

    assert active_only == {"activeSchoolTypes": [{"code": "GR"}, {"code": "GY"}], "total": 2}
    assert with_expired["expiredSchoolTypes"] == [{"code": "GYAN"}]
    assert with_expired["total"] == 3


@pytest.mark.asyncio
async def test_study_path_codes_passes_filters(dummy_mcp):
    client = FakeSyllabusClient()
    valuestore_tool.register(dummy_mcp, syllabus_client=client)

    out = await dummy_mcp.tools["get_study_path_codes"](schooltype="GY", date="2024-07-01")

    assert out == {"studyPaths": [{"code": "NA"}], "total": 1}
    assert client.study_path_params == {
        "schooltype": "GY",
        "timespan": "ALL",
        "date": "2024-07-01",
        "typeOfStudyPath": "ALL",
        "typeOfProgram": "ALL",
    }


@pytest.mark.asyncio
async def test_simple_lists_and_api_info(dummy_mcp):
    valuestore_tool.register(dummy_mcp, syllabus_client=FakeSyllabusClient())

    assert (await dummy_mcp.tools["get_types_of_syllabus"]())["total"] == 1
    assert (await dummy_mcp.tools["get_subject_and_course_codes"]())["codes"] == [{"code": "MAT"}]
    assert await dummy_mcp.tools["get_api_info"]() == {"version": "1.0"}
