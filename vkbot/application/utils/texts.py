WELCOME_TEXT = (
    "🌊 ДОБРО ПОЖАЛОВАТЬ В ЦЕНТР YES!\n\n"
    "Я ваш персональный помощник для организации незабываемого отдыха! 🎯\n\n"
    "🎟 ПОКУПКА БИЛЕТОВ\n"
    "- Выбор даты и сеанса\n"
    "- Раздельные тарифы: взрослые/детские\n"
    "- Переход к оплате онлайн\n\n"
    "📊 ЗАГРУЖЕННОСТЬ\n"
    "- Количество гостей в аквапарке прямо сейчас\n"
    "- Рекомендации по лучшему времени для визита\n\n"
    "ℹ️ ИНФОРМАЦИЯ О ЦЕНТРЕ\n"
    "- Режим работы, контакты и как добраться\n\n"
    "Выберите пункт меню 👇"
)

WORKING_HOURS_TEXT = "🏢 Режим работы:\n\n⏰ Ежедневно: 10:00 - 22:00\n📅 Без выходных"

CONTACTS_TEXT = (
    "📞 Контакты:\n"
    "📱 Телефон для связи:\n"
    "• Основной: (8172) 33-06-06\n"
    "• Ресторан: 8-800-200-67-71\n\n"
    "📧 Электронная почта:\n"
    "yes@yes35.ru\n\n"
    "🌐 Мы в соцсетях:\n"
    "ВКонтакте: vk.com/yes35\n"
    "Telegram: t.me/CentreYES35\n"
    "WhatsApp: ссылка в профиле\n\n"
    "⏰ Часы работы call-центра:\n"
    "🕙 09:00 - 22:00"
)

LOCATION_TEXT = (
    "📍 *Центр YES - Как добраться*\n\n"
    "🏠 Адрес:\n"
    "Вологодская область, М.О. Вологодский\n"
    "д. Брагино, тер. Центр развлечений\n\n"
    "🚗 На автомобиле:\n"
    "• По федеральной трассе А114 'Вологда - Новая Ладога'\n"
    "• На повороте к Центру на трассе установлен заметный баннер-указатель.\n"
    "• 💰 Бесплатная парковка на территории\n\n"
    "🚍 Общественный транспорт:\n"
    "• От автовокзала Вологды (площадь Бабушкина, 10) ходят ежедневные рейсовые автобусы\n\n"
    "🗺 Координаты для навигатора:\n"
    "59.1858° с.ш., 39.7685° в.д.\n\n"
    "⏱ Расстояния:\n"
    "• От г. Вологды: ~34 км\n"
    "• От г. Череповца: ~107 км"
)
