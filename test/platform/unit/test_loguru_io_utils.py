import pytest

from src.platform.logging.loguru_io_utils import (
    mask_sensitive,
    should_mask_keyword,
    truncate_content,
)


@pytest.mark.unit
class TestLoguruIOUtils:
    def test_mask_password_in_text(self) -> None:
        masked = mask_sensitive("password='hunter2', host=relay")

        assert 'hunter2' not in masked
        assert 'host=relay' in masked

    def test_mask_required_meta(self) -> None:
        assert 'secret-meta' not in mask_sensitive('requiredMeta: secret-meta')

    def test_untouched_data_is_returned_as_is(self) -> None:
        data = {'name': 'Shop'}

        assert mask_sensitive(data) is data

    def test_should_mask_keyword(self) -> None:
        assert should_mask_keyword('password', 'x') == '********'
        assert should_mask_keyword('owner', 'x') == 'x'

    def test_truncate_content(self) -> None:
        assert truncate_content('short', max_length=10) == 'short'
        assert truncate_content('a' * 20, max_length=10) == 'aaaaaaaaaa... (+10 chars)'
