from marshmallow import Schema, fields, pre_load, validates, ValidationError, EXCLUDE


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def _check_password(value):
    if value is not None and len(value) < 8:
        raise ValidationError("Password must be at least 8 characters long.")


def _check_nickname(value):
    if value is not None and not value.strip():
        raise ValidationError("Nickname must not be blank.")


class SignupSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    nickname = fields.String(required=True)
    picture = fields.String(allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = _norm_email(data["email"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        _check_password(value)

    @validates("nickname")
    def validate_nickname(self, value, **kwargs):
        _check_nickname(value)


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = _norm_email(data["email"])
        return data


class UserUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    nickname = fields.String(allow_none=True)
    picture = fields.String(allow_none=True)
    password = fields.String(allow_none=True, load_only=True)

    @validates("password")
    def validate_password(self, value, **kwargs):
        _check_password(value)

    @validates("nickname")
    def validate_nickname(self, value, **kwargs):
        _check_nickname(value)


class UserOutSchema(Schema):
    id = fields.Integer()
    email = fields.String(allow_none=True)
    kakaoId = fields.Integer(attribute="kakao_id", allow_none=True)
    nickname = fields.String()
    picture = fields.String(allow_none=True)
    level = fields.Integer()
    experience = fields.Integer()


class RankingOutSchema(Schema):
    nickname = fields.String()
    image = fields.String(attribute="picture", allow_none=True)
    score = fields.Integer(attribute="experience")
