from apps.customers.formatting import mask_cpf, mask_phone, only_digits


class TestMaskCpf:

    def test_full_cpf(self):
        assert mask_cpf('12345678900') == '123.456.789-00'

    def test_already_masked(self):
        assert mask_cpf('123.456.789-00') == '123.456.789-00'

    def test_partial_input(self):
        assert mask_cpf('123') == '123'
        assert mask_cpf('1234') == '123.4'
        assert mask_cpf('1234567') == '123.456.7'
        assert mask_cpf('1234567890') == '123.456.789-0'

    def test_extra_digits_dropped(self):
        assert mask_cpf('1234567890012') == '123.456.789-00'

    def test_empty(self):
        assert mask_cpf('') == ''
        assert mask_cpf(None) == ''


class TestMaskPhone:

    def test_mobile(self):
        assert mask_phone('11987654321') == '(11) 98765-4321'

    def test_landline(self):
        assert mask_phone('1133334444') == '(11) 3333-4444'

    def test_empty(self):
        assert mask_phone('') == ''


def test_only_digits():
    assert only_digits('(11) 98765-4321') == '11987654321'
