from flask_wtf import FlaskForm
from wtforms import Form, StringField, FieldList, FormField
from wtforms.validators import DataRequired, ValidationError
from fabricflow.utils.validators import IdField, clean_str


class ScanForm(FlaskForm):
    """扫码表单 (面料或货架)"""
    code = StringField('Code', filters=[clean_str], validators=[
        DataRequired(message='The QR code is required.')
    ])


class EntryForm(Form):
    """单卷面料的扫码明细"""
    code = StringField('Code', filters=[clean_str], validators=[
        DataRequired(message='The QR code is required.')
    ])
    # 数值与日期在服务层解析
    yard = StringField('Yard')
    finish_date = StringField('Finish date', filters=[clean_str])
    qc_result = StringField('QC result', filters=[clean_str])


class MoveForm(FlaskForm):
    """阶段流转表单，stage 来自查询参数"""
    block_id = IdField('Block')
    rack_id = IdField('Rack')
    relaxation_block_id = IdField('Relaxation block')
    relaxation_rack_id = IdField('Relaxation rack')
    entries = FieldList(FormField(EntryForm))

    def validate_entries(self, field):
        if not field.entries:
            raise ValidationError('The entries field is required.')


class RelocationForm(FlaskForm):
    """整架搬迁表单"""
    current_rack_id = IdField('Current rack', validators=[
        DataRequired(message='The current rack id is required.')
    ])
    new_rack_id = IdField('New rack', validators=[
        DataRequired(message='The new rack id is required.')
    ])
