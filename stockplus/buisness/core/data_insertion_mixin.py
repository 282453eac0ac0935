"""
Dictionary in and out for the stockplus models.

`from_dict` and `find_or_create_from_dict` load the critical users from
build_data_critical.json. `to_dict` is the JSON shape the API returns:
the model's columns plus whatever computed properties the model lists
in ``json_properties``.
"""

from stockplus import db
from datetime import date, datetime
from sqlalchemy import inspect
from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.domain.core.data_insertion")

AUDIT_FIELDS = ('created_by_id', 'updated_by_id')
TIMESTAMP_FIELDS = ('created_at', 'updated_at')
PRIVATE_FIELDS = ('password_hash',)


def _json_value(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class DataInsertionMixin:
    """
    Mixin for building models from plain dicts and rendering them back.

    ``json_properties`` names read-only properties (``total_value``,
    ``employee_code``...) that ``to_dict`` adds next to the columns.
    """

    json_properties = ()

    @classmethod
    def _column_keys(cls):
        return {column.key for column in inspect(cls).columns}

    @classmethod
    def from_dict(cls, data_dict, user_id=None):
        """
        Build an unsaved instance from the keys of ``data_dict`` that are columns.

        A ``password`` key is hashed through ``set_password`` when the model
        has one; unknown keys are ignored.
        """
        columns = cls._column_keys()
        values = {
            key: value for key, value in data_dict.items()
            if key in columns and key not in PRIVATE_FIELDS and not (key in TIMESTAMP_FIELDS and value is None)
        }
        instance = cls(**values)

        if 'password' in data_dict and hasattr(instance, 'set_password'):
            instance.set_password(data_dict['password'])

        if user_id is not None and hasattr(instance, 'stamp'):
            instance.stamp(user_id)

        return instance

    @classmethod
    def find_or_create_from_dict(cls, data_dict, lookup_fields, user_id=None, commit=True):
        """
        Return ``(instance, created)``.

        The lookup matches on ``lookup_fields`` only, so an existing row is
        returned untouched even when other values in ``data_dict`` differ.
        """
        lookup = {field: data_dict[field] for field in lookup_fields if field in data_dict}
        if not lookup:
            raise ValueError(f"{cls.__name__} lookup needs one of {', '.join(lookup_fields)}")

        existing = cls.query.filter_by(**lookup).first()
        if existing:
            logger.info(f"Found existing {cls.__name__}: {existing}")
            return existing, False

        instance = cls.from_dict(data_dict, user_id)
        db.session.add(instance)
        try:
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating {cls.__name__} from {sorted(lookup)}: {e}")
            raise

        logger.info(f"Created {cls.__name__}: {instance}")
        return instance, True

    def to_dict(self, include_audit_fields=False):
        result = {}
        for column in inspect(self.__class__).columns:
            if column.key in PRIVATE_FIELDS:
                continue
            if column.key in AUDIT_FIELDS and not include_audit_fields:
                continue
            result[column.key] = _json_value(getattr(self, column.key))

        for name in self.json_properties:
            result[name] = _json_value(getattr(self, name))
        return result
