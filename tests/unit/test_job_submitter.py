"""
任务提交单元测试
"""

import pytest

from revegen.core.exceptions import ParameterValidationError, ReveErrorType, UnexpectedResponseError
from revegen.schemas.generation import JobSpec
from revegen.services.generation.job_submitter import (
    JobIdMatch,
    JobSubmitter,
    build_generation_payload,
    extract_job_id,
)
from revegen.utils.id_utils import is_valid_uuid
from tests.utils.fake_service import PROJECT_ID


def make_job(**overrides) -> JobSpec:
    values = {
        "index": 0,
        "prompt": "a cat",
        "negative_prompt": "blurry",
        "width": 768,
        "height": 512,
        "model": "text2image_v1/prod/20250325-2246",
        "enhance_prompt": True,
        "seed": 42,
        "prompt_variant": "a fluffy cat",
    }
    values.update(overrides)
    return JobSpec(**values)


@pytest.mark.unit
@pytest.mark.generation
class TestExtractJobId:
    """测试任务ID解析"""

    def test_nested_shape(self):
        assert extract_job_id({"create": {"node": {"id": "n-1"}}}) == JobIdMatch("n-1", "create.node.id")

    def test_flat_shape(self):
        assert extract_job_id({"generation_id": "g-1"}) == JobIdMatch("g-1", "generation_id")

    def test_nested_shape_preferred(self):
        """测试两种格式同时存在时优先新格式"""
        match = extract_job_id({"create": {"node": {"id": "n-1"}}, "generation_id": "g-1"})
        assert match.job_id == "n-1"

    @pytest.mark.parametrize("payload", [
        None,
        [],
        {},
        {"create": {}},
        {"create": {"node": {}}},
        {"generation_id": ""},
    ])
    def test_unmatched(self, payload):
        assert extract_job_id(payload) is None


@pytest.mark.unit
@pytest.mark.generation
class TestBuildGenerationPayload:
    """测试请求体构建"""

    def test_payload_fields(self):
        payload = build_generation_payload(make_job(), "tracking-1")

        assert payload["data"]["client_metadata"] == {
            "aspectRatio": "768:512",
            "instruction": "a cat",
            "optimizeEnabled": True,
            "unexpandedPrompt": "a cat",
        }
        assert payload["data"]["inference_inputs"] == {
            "caption": "a fluffy cat",
            "height": 512,
            "negative_caption": "blurry",
            "seed": 42,
            "width": 768,
        }
        assert payload["data"]["inference_model"] == "text2image_v1/prod/20250325-2246"
        assert payload["node"]["id"] == "tracking-1"
        assert payload["node"]["name"] == "My Generation"

    def test_caption_is_prompt_when_enhancement_disabled(self):
        """测试关闭增强时使用原始提示词"""
        payload = build_generation_payload(make_job(enhance_prompt=False), "tracking-1")
        assert payload["data"]["inference_inputs"]["caption"] == "a cat"


@pytest.mark.unit
@pytest.mark.generation
class TestJobSubmitter:
    """JobSubmitter 单元测试类"""

    @pytest.fixture
    def submitter(self, transport, project_resolver):
        return JobSubmitter(transport, project_resolver)

    @pytest.mark.asyncio
    async def test_submit_nested_response(self, submitter, fake_service):
        """测试新格式响应"""
        job = make_job()
        handle = await submitter.submit(job)

        assert handle.job_id == "job-0"
        assert handle.project_id == PROJECT_ID
        assert handle.job is job
        assert fake_service.requests[0].url.path == f"/api/project/{PROJECT_ID}/generation"

    @pytest.mark.asyncio
    async def test_submit_flat_response(self, submitter, fake_service):
        """测试旧格式响应"""
        fake_service.submit_shape = "flat"
        handle = await submitter.submit(make_job())
        assert handle.job_id == "job-0"

    @pytest.mark.asyncio
    async def test_unexpected_response(self, submitter, fake_service):
        """测试无法识别的响应携带原始内容"""
        fake_service.submit_shape = "unknown"

        with pytest.raises(UnexpectedResponseError) as exc_info:
            await submitter.submit(make_job())

        assert exc_info.value.error_type is ReveErrorType.UNEXPECTED_RESPONSE
        assert exc_info.value.payload == {"status": "queued"}
        assert "Failed to get generation ID from response" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_tracking_ids_are_unique(self, submitter, fake_service):
        """测试每次提交生成新的跟踪ID"""
        await submitter.submit(make_job())
        await submitter.submit(make_job(index=1))

        node_ids = [payload["node"]["id"] for payload in fake_service.submissions]
        assert len(set(node_ids)) == 2
        assert all(is_valid_uuid(node_id) for node_id in node_ids)

    @pytest.mark.asyncio
    async def test_invalid_dimensions_make_no_request(self, submitter, fake_service):
        """测试尺寸非法时不发出任何请求"""
        with pytest.raises(ParameterValidationError):
            await submitter.submit(make_job(width=1025))

        assert fake_service.requests == []
