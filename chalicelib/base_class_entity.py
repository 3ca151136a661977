from typing import Dict, List, Any

from chalicelib.constants.substitute_keys import from_db
from chalicelib.utils import storage as utils_storage, exceptions
from chalicelib.utils.data import substitute_keys, now_iso
from chalicelib.utils.logger import logger


class EntityBase:
    """
    Entity persisted as one record of a list blob in the storage
    """
    storage_key = None

    required_immutable_fields_validation = {}
    required_mutable_fields_validation = {}
    optional_fields_validation = {}

    def __init__(self, id_):
        self.id_: str = id_
        self.record_type: str = ''
        self.db_record: Dict = {}
        self.request_data: Any[Dict, None] = None

    def _get_storage_key(self) -> str:
        """
        Should be re-implemented in child classes which keep records under a formatted key
        :return:
        key of the list blob keeping the entity records
        """
        return self.storage_key

    def _get_records(self) -> List[Dict]:
        return utils_storage.get_blob(self._get_storage_key(), [])

    def _save_records(self, records: List[Dict]) -> None:
        utils_storage.put_blob(self._get_storage_key(), records)

    def _get_db_item(self) -> Dict:
        for record in self._get_records():
            if record.get('id_') == self.id_:
                return record
        logger.error(f"_get_db_item ::: {self.record_type=} {self.id_=} not found")
        raise exceptions.RecordNotFound(f'{self.record_type or "record"} {self.id_} not found')

    def _to_dict(self) -> Dict:
        """
        Should be re-implemented in each child class
        :return:
        dict of item's attributes
        """
        return {
            'id_': self.id_,
            'record_type': self.record_type
        }

    def _init_db_record(self) -> None:
        """
        New DB record initialization
        :return:
        None
        """
        self.db_record = {
            'record_type': self.record_type,
            **self._to_dict()
        }

    @staticmethod
    def raise_validation_error(key):
        message = f'Validation error occurred while validating the field={key}'
        logger.error(f"raise_validation_error ::: {message}")
        raise exceptions.ValidationException(message)

    def _validate_mandatory_fields(self):
        """
        Validates mandatory fields if all fields have correct type to put to db
        Raise ValidationException in case if a field is not valid
        :return:
        None
        """
        for key, validator_func in {
            **self.required_immutable_fields_validation,
            **self.required_mutable_fields_validation
        }.items():
            if validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key)

    def _validate_optional_fields(self):
        """
        Validates optional fields if they are set
        Raise ValidationException in case if a field is not valid
        :return:
        None
        """
        for key, validator_func in self.optional_fields_validation.items():
            if self.db_record.get(key) is not None and validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key)

    def _get_validated_update_dict(self) -> Dict:
        """
        Validates fields for update
        Delete field if it is not valid
        :return:
        Clean dict for update
        (all invalid fields will be automatically excluded)
        """
        update_dict = self._to_dict()
        clean_dict = {}
        validation_dict = {**self.required_mutable_fields_validation, **self.optional_fields_validation}
        for key, value in update_dict.items():
            if key in validation_dict and validation_dict[key](value) is True:
                clean_dict[key] = value
            elif key in validation_dict:
                logger.warning(f'_get_validated_update_dict ::: {key=}, {value=} is not valid, '
                               f'removing from update dict..')
        return clean_dict

    def _create_db_record(self) -> None:
        """
        Validates and appends the entity record to its list blob
        :return:
        None
        """
        self._init_db_record()
        self._validate_mandatory_fields()
        self._validate_optional_fields()
        records = self._get_records()
        records.append(self.db_record)
        self._save_records(records)
        logger.info(f"_create_db_record ::: {self.record_type=} {self.id_=} "
                    f"{self._get_storage_key()=} successfully created")

    def _update_db_record(self) -> None:
        """
        Merges validated mutable fields into the stored record
        :return:
        None
        """
        self.date_updated = now_iso()
        update_dict = self._get_validated_update_dict()
        records = self._get_records()
        for record in records:
            if record.get('id_') == self.id_:
                record.update(update_dict)
                self.db_record = record
                break
        else:
            raise exceptions.RecordNotFound(f'{self.record_type or "record"} {self.id_} not found')
        self._save_records(records)
        logger.info(f"_update_db_record ::: {self.record_type=} {self.id_=} successfully updated")

    def _to_ui(self) -> Dict:
        item = self._to_dict()
        substitute_keys(dict_to_process=item, base_keys=from_db)
        return item
