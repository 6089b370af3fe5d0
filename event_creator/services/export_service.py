"""
Guest list templates and exports
"""

import io
from typing import List, Tuple

import pandas as pd

from event_creator.models import Event, Guest

class ExportService:
    """Service for producing downloadable guest files"""
    
    TEMPLATE_COLUMNS = ['Name', 'Email', 'Phone']
    TEMPLATE_ROWS = [
        ['John Doe', 'john@example.com', '+1234567890'],
        ['Jane Smith', 'jane@example.com', '+0987654321'],
    ]
    EXPORT_COLUMNS = ['Name', 'Email', 'Phone', 'Status', 'Event', 'Event Date']
    
    @staticmethod
    def csv_template() -> str:
        """Fixed CSV template for guest imports"""
        lines = [','.join(ExportService.TEMPLATE_COLUMNS)]
        lines.extend(','.join(row) for row in ExportService.TEMPLATE_ROWS)
        return '\n'.join(lines) + '\n'
    
    @staticmethod
    def excel_template() -> bytes:
        """Excel version of the import template"""
        df = pd.DataFrame(ExportService.TEMPLATE_ROWS, columns=ExportService.TEMPLATE_COLUMNS)
        
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Guest List')
        
        return buffer.getvalue()
    
    @staticmethod
    def export_guests_csv(guests: List[Tuple[Guest, Event]]) -> str:
        """Export guests of all events with their event title and date"""
        data = [
            {
                'Name': guest.name,
                'Email': guest.email or '',
                'Phone': guest.phone or '',
                'Status': guest.status,
                'Event': event.title,
                'Event Date': event.date.isoformat(),
            }
            for guest, event in guests
        ]
        
        df = pd.DataFrame(data, columns=ExportService.EXPORT_COLUMNS)
        return df.to_csv(index=False)
