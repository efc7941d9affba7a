from django.db import DatabaseError, connections
from django.http import JsonResponse

from care.services.locator import approved_hospitals


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        hospitals = approved_hospitals().count()
    except DatabaseError as e:
        return JsonResponse({'ok': False, 'error': str(e)}, status=500)
    return JsonResponse({'ok': True, 'db': bool(row and row[0] == 1), 'operationalHospitals': hospitals})
