"""
Dispatching models

- DispatchRecord: one vehicle visit through the station workflow
- ServiceCharge: billable line item attached to a DispatchRecord
"""
